import numpy as np

import taichi as ti

CHANNELS = 4
ALIVE = 255  # unorm 1.0
DEAD = 0


def encode(cells):
    """Converts a boolean ``[x, y]`` array into the RGBA8 cell encoding."""
    cells = np.asarray(cells, dtype=bool)
    return np.repeat(np.where(cells, ALIVE, DEAD).astype(np.uint8)[..., None], CHANNELS, axis=-1)


def decode(pixels):
    """Converts RGBA8 cells back into a boolean ``[x, y]`` array."""
    return np.asarray(pixels)[..., 0] != DEAD


@ti.func
def is_alive(generation: ti.template(), x, y):
    return ti.select(generation[x, y][0] != DEAD, 1, 0)


@ti.func
def encode_cell(alive):
    v = ti.cast(ti.select(alive != 0, ALIVE, DEAD), ti.u8)
    return ti.Vector([v, v, v, v])


class GenerationPair:
    """The two generation buffers of a simulation.

    Both fields live in one SNode tree so they are allocated and released
    together. An index flag selects which of them is current; the other one is
    the write target of the next update.
    """

    def __init__(self, shape):
        self.shape = tuple(shape)
        self._buffers = [ti.Vector.field(CHANNELS, dtype=ti.u8) for _ in range(2)]
        fb = ti.FieldsBuilder()
        for buf in self._buffers:
            fb.dense(ti.ij, self.shape).place(buf)
        self._tree = fb.finalize()
        self._current = 0

    @property
    def current(self):
        return self._buffers[self._current]

    @property
    def next(self):
        return self._buffers[1 - self._current]

    @property
    def current_index(self):
        return self._current

    @property
    def alive(self):
        return self._tree is not None

    def swap(self):
        self._current = 1 - self._current

    def destroy(self):
        if self._tree is not None:
            self._tree.destroy()
            self._tree = None


__all__ = ["GenerationPair", "encode", "decode"]
