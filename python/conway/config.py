import os
from enum import Enum

from conway import _logging
from conway.exception import ConfigError


class EdgePolicy(Enum):
    """How neighbour reads are addressed at the grid boundary."""

    WRAP = "wrap"
    """Toroidal: coordinates are reduced modulo the grid dimensions."""

    CLAMP = "clamp"
    """Clamp-to-edge: an out-of-range read returns the nearest edge cell."""

    DEAD = "dead"
    """Everything outside the grid reads as a dead cell."""


def _edge_policy(value):
    if isinstance(value, EdgePolicy):
        return value
    try:
        return EdgePolicy(str(value).lower())
    except ValueError:
        choices = ", ".join(p.value for p in EdgePolicy)
        raise ConfigError(f"Invalid edge policy {value!r}, should be one of: {choices}") from None


class _EnvironmentConfigurator:
    def __init__(self, kwargs, _cfg):
        self.cfg = _cfg
        self.kwargs = kwargs
        self.keys = []

    def add(self, key, _cast):
        self.keys.append(key)

        # CONWAY_WIDTH=     : no effect
        # CONWAY_WIDTH=512  : width = 512
        name = "CONWAY_" + key.upper()
        value = os.environ.get(name, "")
        if key in self.kwargs:
            self[key] = self.cast(_cast, key, self.kwargs[key])
            if value:
                _logging.warn(f'Environment variable {name}={value} overridden by argument "{key}"')
            del self.kwargs[key]  # mark as recognized
        elif value:
            self[key] = self.cast(_cast, name, value)

    def __getitem__(self, key):
        return getattr(self.cfg, key)

    def __setitem__(self, key, value):
        setattr(self.cfg, key, value)

    @staticmethod
    def cast(_cast, name, value):
        try:
            return _cast(value)
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value {value!r} for {name}: {e}") from None


class SimulationConfig:
    """Host-facing parameters of a simulation run.

    Every option can be passed as a keyword or through the environment
    variable ``CONWAY_<OPTION>`` (e.g. ``CONWAY_WIDTH=512``). Keywords take
    precedence over the environment.

    Args:
        width (int): Grid width in cells.
        height (int): Grid height in cells.
        alive_threshold (float): A cell is seeded alive when its random value
            is strictly greater than this. ``0.9`` gives about 10% density.
        edge_policy (Union[str, EdgePolicy]): Boundary addressing, one of
            ``wrap``, ``clamp`` or ``dead``.
        seed (int): Salt mixed into the seed values, ``0`` reproduces the
            canonical generation 0.
        tick_rate (int): Ticks per second in interactive mode, ``0`` for unlimited.
        steps_per_frame (int): Ticks advanced between two displayed frames.
        cell_size (int): Window pixels per cell.
    """

    def __init__(self, **kwargs):
        self.width = 1280
        self.height = 720
        self.alive_threshold = 0.9
        self.edge_policy = EdgePolicy.WRAP
        self.seed = 0
        self.tick_rate = 60
        self.steps_per_frame = 1
        self.cell_size = 1

        env = _EnvironmentConfigurator(dict(kwargs), self)
        env.add("width", int)
        env.add("height", int)
        env.add("alive_threshold", float)
        env.add("edge_policy", _edge_policy)
        env.add("seed", int)
        env.add("tick_rate", int)
        env.add("steps_per_frame", int)
        env.add("cell_size", int)

        unexpected = list(env.kwargs.keys())
        if unexpected:
            raise ConfigError(f"Unrecognized options: {', '.join(sorted(unexpected))}")
        self.validate()

    def validate(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.width * self.height >= 2**31:
            raise ConfigError(f"Grid of {self.width}x{self.height} cells is too large to index")
        if not 0.0 <= self.alive_threshold <= 1.0:
            raise ConfigError(f"alive_threshold must lie in [0, 1], got {self.alive_threshold}")
        if not 0 <= self.seed < 2**32:
            raise ConfigError(f"seed must fit in 32 unsigned bits, got {self.seed}")
        if self.tick_rate < 0:
            raise ConfigError(f"tick_rate must be non-negative, got {self.tick_rate}")
        if self.steps_per_frame < 1:
            raise ConfigError(f"steps_per_frame must be at least 1, got {self.steps_per_frame}")
        if self.cell_size < 1:
            raise ConfigError(f"cell_size must be at least 1, got {self.cell_size}")

    @property
    def shape(self):
        return (self.width, self.height)

    @property
    def window_res(self):
        return (self.width * self.cell_size, self.height * self.cell_size)

    def __repr__(self):
        return (
            f"SimulationConfig(width={self.width}, height={self.height}, "
            f"alive_threshold={self.alive_threshold}, edge_policy={self.edge_policy.value}, "
            f"seed={self.seed}, tick_rate={self.tick_rate}, "
            f"steps_per_frame={self.steps_per_frame}, cell_size={self.cell_size})"
        )


__all__ = ["EdgePolicy", "SimulationConfig"]
