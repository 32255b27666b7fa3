import taichi as ti

from conway import _logging
from conway.buffers import encode_cell
from conway.hashing import cell_seed, random_float

WORKGROUP_SIZE = (8, 8)
TILE_INVOCATIONS = WORKGROUP_SIZE[0] * WORKGROUP_SIZE[1]

DEFAULT_ALIVE_THRESHOLD = 0.9


def dispatch_size(shape):
    """Number of 8x8 workgroups needed to cover a grid of ``shape`` cells.

    The last row and column of tiles may hang over the grid edge, so every
    invocation has to bounds-check its own coordinate.
    """
    width, height = shape
    return (
        (width + WORKGROUP_SIZE[0] - 1) // WORKGROUP_SIZE[0],
        (height + WORKGROUP_SIZE[1] - 1) // WORKGROUP_SIZE[1],
    )


@ti.kernel
def _init(generation: ti.template(), groups_x: ti.i32, groups_y: ti.i32, threshold: ti.f32, salt: ti.u32):
    width = generation.shape[0]
    height = generation.shape[1]
    ti.loop_config(block_dim=TILE_INVOCATIONS)
    for x, y in ti.ndrange(groups_x * WORKGROUP_SIZE[0], groups_y * WORKGROUP_SIZE[1]):
        if x < width and y < height:
            alive = random_float(cell_seed(x, y, width, height, salt)) > threshold
            generation[x, y] = encode_cell(ti.select(alive, 1, 0))


def init(generation, threshold=DEFAULT_ALIVE_THRESHOLD, seed=0):
    """Seeds ``generation`` with generation 0.

    Args:
        generation (ti.MatrixField): The buffer to populate, usually the one
            that becomes current.
        threshold (float): A cell is alive when its random value exceeds this.
        seed (int): Salt added to every cell's seed value.
    """
    groups_x, groups_y = dispatch_size(generation.shape)
    _logging.debug(f"init dispatch: {groups_x}x{groups_y} workgroups, threshold={threshold}, seed={seed}")
    _init(generation, groups_x, groups_y, threshold, seed)


__all__ = ["WORKGROUP_SIZE", "dispatch_size", "init"]
