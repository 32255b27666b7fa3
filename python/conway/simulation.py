import numpy as np

import taichi as ti

from conway import _logging, rules, seeding
from conway.buffers import GenerationPair, decode, encode
from conway.config import SimulationConfig
from conway.exception import ConfigError, DeviceLostError, handle_exception_from_taichi


class Simulation:
    """Host driver of the automaton.

    Owns the two generation buffers and is the only place where their roles
    are swapped. Every seeding or update dispatch is followed by a barrier
    (:func:`ti.sync`), so dispatch N+1 and any host read see all writes of
    dispatch N.

    ``ti.init`` must have been called before a simulation is created.

    Args:
        config (SimulationConfig): Parameters of the run. When omitted, one is
            built from ``options`` and the ``CONWAY_*`` environment.
        **options: Keyword arguments forwarded to :class:`SimulationConfig`.

    Example::

        >>> ti.init(arch=ti.gpu)
        >>> sim = Simulation(width=256, height=256)
        >>> sim.step(10)
        >>> sim.count_alive()
    """

    def __init__(self, config=None, **options):
        if config is None:
            config = SimulationConfig(**options)
        elif options:
            raise ConfigError("Pass either a SimulationConfig or keyword options, not both")
        self.config = config
        self.tick = 0
        self.generations = None
        self._lost = False
        self._allocate()
        self._compile_update()
        self.seed()

    @property
    def shape(self):
        return self.config.shape

    @property
    def current(self):
        """The field holding the latest generation. Read it, never write it."""
        self._check_usable()
        return self.generations.current

    @property
    def lost(self):
        return self._lost

    def _allocate(self):
        self.generations = GenerationPair(self.shape)
        _logging.info(f"Allocated two {self.shape[0]}x{self.shape[1]} generation buffers")

    def _check_usable(self):
        if self._lost:
            raise DeviceLostError("The device was lost, call reset() before using this simulation again")
        if self.generations is None or not self.generations.alive:
            raise DeviceLostError("The generation buffers have been released")

    def _dispatch(self, stage, func, *args):
        self._check_usable()
        try:
            func(*args)
            ti.sync()
        except Exception as e:
            exc = handle_exception_from_taichi(e, stage)
            if isinstance(exc, DeviceLostError):
                self._lost = True
                _logging.warn(str(exc))
            if exc is e:
                raise
            raise exc from e

    def _compile_update(self):
        # Runs the update once in each buffer order before seeding, so a broken
        # kernel fails here rather than on the first or second tick.
        pair = self.generations
        self._dispatch("update", rules.update, pair.current, pair.next, self.config.edge_policy)
        self._dispatch("update", rules.update, pair.next, pair.current, self.config.edge_policy)

    def seed(self, seed=None):
        """Materializes generation 0 in the current buffer.

        Args:
            seed (int): Overrides ``config.seed`` for this and later seedings.
        """
        if seed is not None:
            previous, self.config.seed = self.config.seed, seed
            try:
                self.config.validate()
            except ConfigError:
                self.config.seed = previous
                raise
        self._check_usable()
        self._dispatch(
            "init",
            seeding.init,
            self.generations.current,
            self.config.alive_threshold,
            self.config.seed,
        )
        self.tick = 0
        _logging.debug(f"Seeded generation 0 with seed={self.config.seed}")

    def step(self, ticks=1):
        """Advances the simulation by ``ticks`` generations."""
        for _ in range(ticks):
            self._check_usable()
            self._dispatch(
                "update",
                rules.update,
                self.generations.current,
                self.generations.next,
                self.config.edge_policy,
            )
            self.generations.swap()
            self.tick += 1

    def reset(self, seed=None):
        """Reallocates both buffers and re-seeds, recovering from a lost device."""
        if self.generations is not None:
            try:
                self.generations.destroy()
            except RuntimeError as e:
                _logging.warn(f"Failed to release the old generation buffers: {e}")
        self._lost = False
        self._allocate()
        self._compile_update()
        self.seed(seed)

    def release(self):
        if self.generations is not None:
            self.generations.destroy()
            self.generations = None

    def count_alive(self):
        self._check_usable()
        return int(rules.count_alive(self.generations.current))

    def paint(self, points, alive=True):
        """Sets the cells under normalized positions to alive or dead.

        Args:
            points (array_like): ``(N, 2)`` positions in ``[0, 1)^2``, origin at
                the bottom-left corner, e.g. :func:`ti.GUI.get_cursor_pos`.
            alive (bool): Value written into the cells.
        """
        self._check_usable()
        points = np.asarray(points, dtype=np.float32).reshape(-1, 2)
        if len(points) == 0:
            return
        self._dispatch("paint", rules.paint, self.generations.current, points, int(bool(alive)))

    def clear(self):
        self._check_usable()
        self._dispatch("clear", rules.fill, self.generations.current, 0)

    def load(self, cells):
        """Replaces the current generation with a host bool array indexed ``[x, y]``."""
        cells = np.asarray(cells, dtype=bool)
        if cells.shape != self.shape:
            raise ConfigError(f"Expected cells of shape {self.shape}, got {cells.shape}")
        self._check_usable()
        self.generations.current.from_numpy(encode(cells))

    def to_numpy(self):
        """Bool snapshot of the current generation, indexed ``[x, y]``."""
        self._check_usable()
        return decode(self.generations.current.to_numpy())


__all__ = ["Simulation"]
