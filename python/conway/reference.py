"""
Host-side reference model of the automaton.

Everything here is plain NumPy and mirrors the device kernels bit for bit:
the hash works on wrapping ``uint32`` arrays, ``random_float`` keeps the same
24 bits, and :func:`step` derives every next state from one fixed snapshot of
the current generation. Device results are checked against it.
"""
import numpy as np

from conway.config import EdgePolicy
from conway.hashing import FLOAT_BITS, HASH_MUL, HASH_XOR

_PAD_MODES = {
    EdgePolicy.WRAP: "wrap",
    EdgePolicy.CLAMP: "edge",
    EdgePolicy.DEAD: "constant",
}


def _u32(value):
    # ndmin=1 keeps the arithmetic on arrays, where uint32 overflow wraps silently
    return np.array(value, dtype=np.uint32, ndmin=1)


def hash_u32(value):
    """Same avalanche hash as :func:`conway.hashing.hash_u32`, over arrays."""
    shape = np.shape(value)
    state = _u32(value)
    mul = np.uint32(HASH_MUL)
    state = state ^ np.uint32(HASH_XOR)
    state = state * mul
    state = state ^ (state >> np.uint32(16))
    state = state * mul
    state = state ^ (state >> np.uint32(16))
    state = state * mul
    return state.reshape(shape)


def random_float(value):
    bits = hash_u32(value) >> np.uint32(32 - FLOAT_BITS)
    return bits.astype(np.float32) * np.float32(1.0 / (1 << FLOAT_BITS))


def seed_values(width, height, seed=0):
    """Per-cell seed values, indexed ``[x, y]``."""
    x, y = np.meshgrid(np.arange(width, dtype=np.uint32), np.arange(height, dtype=np.uint32), indexing="ij")
    offset = np.uint32((seed * width * height) % 2**32)
    return y * np.uint32(width) + x + offset


def seed_generation(width, height, threshold=0.9, seed=0):
    return random_float(seed_values(width, height, seed)) > np.float32(threshold)


def next_state(alive, n):
    alive = np.asarray(alive, dtype=bool)
    n = np.asarray(n)
    return (n == 3) | ((n == 2) & alive)


def count_neighbors(cells, policy=EdgePolicy.WRAP):
    cells = np.asarray(cells, dtype=bool)
    width, height = cells.shape
    padded = np.pad(cells.astype(np.int32), 1, mode=_PAD_MODES[policy])
    counts = np.zeros((width, height), dtype=np.int32)
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += padded[1 + dx : 1 + dx + width, 1 + dy : 1 + dy + height]
    return counts


def step(cells, policy=EdgePolicy.WRAP):
    """Next generation of ``cells``, every cell computed from the same snapshot."""
    cells = np.asarray(cells, dtype=bool)
    return next_state(cells, count_neighbors(cells, policy))


def simulate(cells, ticks, policy=EdgePolicy.WRAP):
    """Returns the generations ``0..ticks`` starting from ``cells``."""
    history = [np.asarray(cells, dtype=bool).copy()]
    for _ in range(ticks):
        history.append(step(history[-1], policy))
    return history


__all__ = ["hash_u32", "random_float", "seed_generation", "next_state", "count_neighbors", "step", "simulate"]
