import taichi as ti

# Mixing constants of the avalanche hash
HASH_XOR = 0xA3C59AC3
HASH_MUL = 0x9E3779B9  # 2^32 / golden ratio

# random_float keeps the top 24 bits so the f32 result is exact and below 1.0
FLOAT_BITS = 24


@ti.func
def hash_u32(value):
    """Avalanche hash of a 32-bit unsigned integer.

    One xor with a fixed key, then three odd-constant multiplies separated by
    xorshifts. Every operation wraps modulo 2^32, so the result is identical on
    every backend.
    """
    state = ti.cast(value, ti.u32)
    state ^= ti.u32(HASH_XOR)
    state *= ti.u32(HASH_MUL)
    state ^= ti.bit_shr(state, ti.u32(16))
    state *= ti.u32(HASH_MUL)
    state ^= ti.bit_shr(state, ti.u32(16))
    state *= ti.u32(HASH_MUL)
    return state


@ti.func
def random_float(value):
    """Uniform float in [0, 1) derived from :func:`hash_u32`."""
    bits = ti.bit_shr(hash_u32(value), ti.u32(32 - FLOAT_BITS))
    return ti.cast(bits, ti.f32) * (1.0 / (1 << FLOAT_BITS))


@ti.func
def cell_seed(x, y, width, height, salt):
    """Seed value of cell ``(x, y)``: its linear grid index, offset by ``salt`` grids."""
    index = ti.cast(y * width + x, ti.u32)
    return index + ti.cast(salt, ti.u32) * ti.cast(width * height, ti.u32)


__all__ = ["hash_u32", "random_float", "cell_seed"]
