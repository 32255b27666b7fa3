import argparse
import sys
import timeit
from functools import wraps
from pathlib import Path

import numpy as np
from colorama import Fore, Style
from rich.console import Console
from rich.table import Table

import taichi as ti

from conway import _logging, patterns, reference
from conway.config import EdgePolicy, SimulationConfig

ARCHS = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
    "opengl": ti.opengl,
}


def timer(func):
    """Function decorator to benchmark a function running time."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start = timeit.default_timer()
        result = func(*args, **kwargs)
        elapsed = timeit.default_timer() - start
        print(f">>> Running time: {elapsed:.2f}s")
        return result

    return wrapper


def registerableCLI(cls):
    """Class decorator to register methods with @register into a set."""
    cls.registered_commands = set([])
    for name in dir(cls):
        method = getattr(cls, name)
        if hasattr(method, "registered"):
            cls.registered_commands.add(name)
    return cls


def register(func):
    """Method decorator to register CLI commands."""
    func.registered = True
    return func


@registerableCLI
class ConwayMain:
    def __init__(self, test_mode: bool = False):
        self.banner = f"\n{'*' * 43}\n**         Conway's Game of Life         **\n{'*' * 43}"
        print(self.banner)

        parser = argparse.ArgumentParser(description="Conway CLI", usage=self._usage())
        parser.add_argument("command", help="command from the above list to run")

        # Flag for unit testing
        self.test_mode = test_mode

        self.main_parser = parser

    @timer
    def __call__(self):
        # Print help if no command provided
        if len(sys.argv[1:2]) == 0:
            self.main_parser.print_help()
            return 1

        # Parse the command
        args = self.main_parser.parse_args(sys.argv[1:2])

        if args.command not in self.registered_commands:  # pylint: disable=E1101
            print(f"{args.command} is not a valid command!")
            self.main_parser.print_help()
            return 1

        return getattr(self, args.command)(sys.argv[2:])

    def _usage(self) -> str:
        """Compose deterministic usage message based on registered_commands."""
        msg = "\n"
        space = 20
        for command in sorted(self.registered_commands):  # pylint: disable=E1101
            msg += f"    {command}{' ' * (space - len(command))}|-> {getattr(self, command).__doc__}\n"
        return msg

    @staticmethod
    def _add_simulation_arguments(parser):
        parser.add_argument(
            "-a",
            "--arch",
            required=False,
            default="gpu",
            dest="arch",
            choices=sorted(ARCHS),
            help="The arch (backend) to run the simulation on",
        )
        parser.add_argument("--width", dest="width", type=int, default=None, help="Grid width in cells")
        parser.add_argument("--height", dest="height", type=int, default=None, help="Grid height in cells")
        parser.add_argument(
            "-t",
            "--threshold",
            dest="alive_threshold",
            type=float,
            default=None,
            help="Cells are seeded alive when their random value exceeds this [default: 0.9]",
        )
        parser.add_argument(
            "-e",
            "--edge",
            dest="edge_policy",
            choices=[p.value for p in EdgePolicy],
            default=None,
            help="Edge policy [default: wrap]",
        )
        parser.add_argument("-s", "--seed", dest="seed", type=int, default=None, help="Seed salt [default: 0]")
        parser.add_argument(
            "-p",
            "--pattern",
            dest="pattern",
            choices=patterns.names(),
            default=None,
            help="Start from a single pattern in the middle of an empty grid instead of a random soup",
        )

    @staticmethod
    def _make_config(args, **extra):
        options = {
            key: getattr(args, key)
            for key in ("width", "height", "alive_threshold", "edge_policy", "seed")
            if getattr(args, key, None) is not None
        }
        options.update({k: v for k, v in extra.items() if v is not None})
        return SimulationConfig(**options)

    @staticmethod
    def _make_simulation(args, config):
        from conway.simulation import Simulation  # pylint: disable=C0415

        ti.init(arch=ARCHS[args.arch])
        sim = Simulation(config)
        if args.pattern:
            cells = np.zeros(config.shape, dtype=bool)
            pattern = patterns.get(args.pattern)
            x = (config.width - pattern.shape[0]) // 2
            y = (config.height - pattern.shape[1]) // 2
            sim.load(patterns.stamp(cells, pattern, x, y, wrap=config.edge_policy == EdgePolicy.WRAP))
        return sim

    @register
    def run(self, arguments: list = sys.argv[2:]):
        """Run the simulation in an interactive window"""
        parser = argparse.ArgumentParser(prog="conway run", description=f"{self.run.__doc__}")
        self._add_simulation_arguments(parser)
        parser.add_argument(
            "-r", "--tick-rate", dest="tick_rate", type=int, default=None, help="Ticks per second, 0 for unlimited"
        )
        parser.add_argument(
            "--steps-per-frame", dest="steps_per_frame", type=int, default=None, help="Ticks between two frames"
        )
        parser.add_argument("--cell-size", dest="cell_size", type=int, default=None, help="Window pixels per cell")
        args = parser.parse_args(arguments)
        config = self._make_config(
            args, tick_rate=args.tick_rate, steps_per_frame=args.steps_per_frame, cell_size=args.cell_size
        )

        # Short circuit for testing
        if self.test_mode:
            return args

        from conway.app import run_interactive  # pylint: disable=C0415

        sim = self._make_simulation(args, config)
        run_interactive(sim)
        return None

    @register
    def video(self, arguments: list = sys.argv[2:]):
        """Record the simulation into a video without opening a window"""
        parser = argparse.ArgumentParser(prog="conway video", description=f"{self.video.__doc__}")
        self._add_simulation_arguments(parser)
        parser.add_argument(
            "-o",
            "--output",
            required=False,
            default=Path("./conway_video").resolve(),
            dest="output_dir",
            type=lambda x: Path(x).resolve(),
            help="Directory of the output video",
        )
        parser.add_argument("-n", "--frames", dest="frames", type=int, default=240, help="Number of frames")
        parser.add_argument("-f", "--framerate", dest="framerate", type=int, default=24, help="Video frame rate")
        parser.add_argument("--gif", dest="gif", action="store_true", help="Write a GIF instead of an MP4")
        parser.add_argument("--cell-size", dest="cell_size", type=int, default=None, help="Video pixels per cell")
        args = parser.parse_args(arguments)
        config = self._make_config(args, cell_size=args.cell_size)

        if args.frames <= 0:
            parser.error("--frames must be positive")

        # Short circuit for testing
        if self.test_mode:
            return args

        from conway.app import record_video  # pylint: disable=C0415

        sim = self._make_simulation(args, config)
        record_video(sim, str(args.output_dir), args.frames, args.framerate, args.gif)
        return None

    @register
    def verify(self, arguments: list = sys.argv[2:]):
        """Compare device generations against the NumPy reference"""
        parser = argparse.ArgumentParser(prog="conway verify", description=f"{self.verify.__doc__}")
        self._add_simulation_arguments(parser)
        parser.add_argument("-n", "--ticks", dest="ticks", type=int, default=64, help="Number of ticks to compare")
        args = parser.parse_args(arguments)
        config = self._make_config(args)

        # Short circuit for testing
        if self.test_mode:
            return args

        sim = self._make_simulation(args, config)
        expected = sim.to_numpy()
        if not args.pattern:
            seeded = reference.seed_generation(config.width, config.height, config.alive_threshold, config.seed)
            if not np.array_equal(expected, seeded):
                print(f"{Fore.RED}FAIL{Style.RESET_ALL}: generation 0 differs from the reference seeding")
                return 1

        table = Table(title=f"{config.width}x{config.height}, edge={config.edge_policy.value}, arch={args.arch}")
        table.add_column("tick", justify="right")
        table.add_column("alive", justify="right")
        table.add_column("mismatches", justify="right")

        failed = 0
        for tick in range(1, args.ticks + 1):
            sim.step()
            expected = reference.step(expected, config.edge_policy)
            actual = sim.to_numpy()
            mismatches = int(np.count_nonzero(actual != expected))
            if mismatches:
                failed += 1
            if mismatches or tick == args.ticks or tick % max(args.ticks // 8, 1) == 0:
                table.add_row(str(tick), str(int(expected.sum())), str(mismatches))

        Console().print(table)
        if failed:
            print(f"{Fore.RED}FAIL{Style.RESET_ALL}: {failed} of {args.ticks} generations differ")
            return 1
        print(f"{Fore.GREEN}PASS{Style.RESET_ALL}: {args.ticks} generations match the reference")
        return 0

    @register
    def bench(self, arguments: list = sys.argv[2:]):
        """Measure simulation throughput in ticks per second"""
        parser = argparse.ArgumentParser(prog="conway bench", description=f"{self.bench.__doc__}")
        self._add_simulation_arguments(parser)
        parser.add_argument("-n", "--ticks", dest="ticks", type=int, default=1000, help="Number of ticks to time")
        args = parser.parse_args(arguments)
        config = self._make_config(args)

        # Short circuit for testing
        if self.test_mode:
            return args

        sim = self._make_simulation(args, config)
        start = timeit.default_timer()
        sim.step(args.ticks)
        elapsed = timeit.default_timer() - start
        rate = args.ticks / elapsed
        cells = config.width * config.height * rate
        _logging.info(f"{args.ticks} ticks in {elapsed:.3f}s")
        print(f"{rate:.1f} ticks/s, {cells / 1e9:.3f} Gcells/s, {sim.count_alive()} cells alive")
        return None


def main():
    cli = ConwayMain()
    return cli()


if __name__ == "__main__":
    sys.exit(main())
