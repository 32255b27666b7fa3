import numpy as np
import pytest

import taichi as ti
import conway
from conway import reference
from conway.buffers import decode
from conway.seeding import dispatch_size, init
from tests import test_utils


def _generation(shape):
    return ti.Vector.field(4, dtype=ti.u8, shape=shape)


@pytest.mark.parametrize(
    "shape,groups",
    [((8, 8), (1, 1)), ((1, 1), (1, 1)), ((24, 20), (3, 3)), ((9, 16), (2, 2)), ((1280, 720), (160, 90))],
)
def test_dispatch_size(shape, groups):
    assert dispatch_size(shape) == groups


@test_utils.test()
def test_init_matches_reference():
    # Neither side is a multiple of the 8x8 tile
    shape = (37, 29)
    generation = _generation(shape)
    init(generation, threshold=0.9, seed=0)
    np.testing.assert_array_equal(decode(generation.to_numpy()), reference.seed_generation(*shape, threshold=0.9))


@test_utils.test()
def test_init_encodes_all_channels():
    generation = _generation((16, 16))
    init(generation, threshold=0.5)
    pixels = generation.to_numpy()
    assert set(np.unique(pixels)) <= {0, 255}
    for c in range(1, 4):
        np.testing.assert_array_equal(pixels[..., c], pixels[..., 0])


@test_utils.test(arch=ti.cpu, check_out_of_bound=True)
def test_init_skips_cells_outside_the_grid():
    # One 8x8 tile over a 3x5 grid: bound checking traps any out-of-range write
    generation = _generation((3, 5))
    init(generation, threshold=0.0)
    assert decode(generation.to_numpy()).shape == (3, 5)


@test_utils.test()
def test_init_density():
    shape = (256, 256)
    generation = _generation(shape)
    init(generation, threshold=0.9)
    n = shape[0] * shape[1]
    alive = int(decode(generation.to_numpy()).sum())
    p = 0.1
    chi2 = (alive - n * p) ** 2 / (n * p) + ((n - alive) - n * (1 - p)) ** 2 / (n * (1 - p))
    # 99.9% quantile of chi-square with one degree of freedom
    assert chi2 < 10.83


@test_utils.test()
def test_init_threshold_bounds():
    generation = _generation((32, 32))
    init(generation, threshold=1.0)
    assert not decode(generation.to_numpy()).any()
    init(generation, threshold=0.0)
    assert decode(generation.to_numpy()).mean() > 0.99


@test_utils.test()
def test_init_seed_salt():
    shape = (32, 32)
    a = _generation(shape)
    b = _generation(shape)
    init(a, seed=0)
    init(b, seed=1)
    assert not np.array_equal(a.to_numpy(), b.to_numpy())
    np.testing.assert_array_equal(decode(b.to_numpy()), reference.seed_generation(*shape, seed=1))

    init(b, seed=0)
    np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())


def test_reference_density_large_grid():
    shape = (1024, 1024)
    n = shape[0] * shape[1]
    alive = int(reference.seed_generation(*shape).sum())
    p = 0.1
    chi2 = (alive - n * p) ** 2 / (n * p) + ((n - alive) - n * (1 - p)) ** 2 / (n * (1 - p))
    assert chi2 < 10.83


@test_utils.test()
def test_seeded_simulation_is_generation_zero():
    sim = conway.Simulation(width=40, height=24, alive_threshold=0.8, seed=9)
    assert sim.tick == 0
    np.testing.assert_array_equal(sim.to_numpy(), reference.seed_generation(40, 24, threshold=0.8, seed=9))
