import taichi as ti

from conway.buffers import encode_cell, is_alive
from conway.config import EdgePolicy
from conway.exception import BufferRoleError
from conway.seeding import TILE_INVOCATIONS, WORKGROUP_SIZE, dispatch_size


@ti.func
def next_state(alive, n):
    """Conway's B3/S23 rule.

    | n     | next state            |
    |-------|-----------------------|
    | 3     | alive                 |
    | 2     | alive iff alive now   |
    | other | dead                  |
    """
    result = 0
    if n == 3:
        result = 1
    elif n == 2:
        result = alive
    return result


@ti.func
def neighbor_alive(generation: ti.template(), x, y, policy: ti.template()):
    width = generation.shape[0]
    height = generation.shape[1]
    result = 0
    if ti.static(policy == EdgePolicy.WRAP):
        result = is_alive(generation, (x + width) % width, (y + height) % height)
    elif ti.static(policy == EdgePolicy.CLAMP):
        result = is_alive(generation, ti.min(ti.max(x, 0), width - 1), ti.min(ti.max(y, 0), height - 1))
    else:
        if 0 <= x < width and 0 <= y < height:
            result = is_alive(generation, x, y)
    return result


@ti.func
def count_neighbors(generation: ti.template(), x, y, policy: ti.template()):
    n = 0
    for dx, dy in ti.static(ti.ndrange((-1, 2), (-1, 2))):
        if ti.static(dx != 0 or dy != 0):
            n += neighbor_alive(generation, x + dx, y + dy, policy)
    return n


@ti.kernel
def _update(current: ti.template(), nxt: ti.template(), groups_x: ti.i32, groups_y: ti.i32, policy: ti.template()):
    width = current.shape[0]
    height = current.shape[1]
    ti.loop_config(block_dim=TILE_INVOCATIONS)
    for x, y in ti.ndrange(groups_x * WORKGROUP_SIZE[0], groups_y * WORKGROUP_SIZE[1]):
        if x < width and y < height:
            n = count_neighbors(current, x, y, policy)
            nxt[x, y] = encode_cell(next_state(is_alive(current, x, y), n))


def update(current, nxt, policy=EdgePolicy.WRAP):
    """Advances one tick, reading ``current`` and writing ``nxt``.

    Neighbour reads of later invocations must observe the pre-update state,
    so the write target can never be the buffer being read.

    Raises:
        BufferRoleError: ``current`` and ``nxt`` are the same buffer or have
            different shapes.
    """
    if current is nxt:
        raise BufferRoleError("update() must not write into the current generation")
    if current.shape != nxt.shape:
        raise BufferRoleError(f"Generation shapes differ: {current.shape} vs {nxt.shape}")
    groups_x, groups_y = dispatch_size(current.shape)
    _update(current, nxt, groups_x, groups_y, policy)


@ti.kernel
def count_alive(generation: ti.template()) -> ti.i32:
    total = 0
    for x, y in generation:
        total += is_alive(generation, x, y)
    return total


@ti.kernel
def paint(generation: ti.template(), points: ti.types.ndarray(), alive: ti.i32):
    """Sets the cells under normalized positions in [0, 1)^2 to ``alive``."""
    width = generation.shape[0]
    height = generation.shape[1]
    for k in range(points.shape[0]):
        x = ti.cast(ti.floor(points[k, 0] * width), ti.i32)
        y = ti.cast(ti.floor(points[k, 1] * height), ti.i32)
        if 0 <= x < width and 0 <= y < height:
            generation[x, y] = encode_cell(alive)


@ti.kernel
def fill(generation: ti.template(), alive: ti.i32):
    for x, y in generation:
        generation[x, y] = encode_cell(alive)


__all__ = ["next_state", "count_neighbors", "update", "count_alive", "paint", "fill"]
