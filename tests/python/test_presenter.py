import numpy as np
import pytest

import taichi as ti
from conway.buffers import encode
from conway.exception import ConfigError
from conway.render import ALIVE_COLOR, CLEAR_COLOR, DEAD_COLOR, Presenter
from tests import test_utils


def _generation(cells):
    generation = ti.Vector.field(4, dtype=ti.u8, shape=cells.shape)
    generation.from_numpy(encode(cells))
    return generation


@test_utils.test()
def test_full_screen_quad_samples_cell_under_pixel():
    cells = np.zeros((4, 4), dtype=bool)
    cells[0, 0] = cells[3, 1] = cells[1, 3] = cells[2, 2] = True
    presenter = Presenter((8, 8))
    image = presenter.present(_generation(cells)).to_numpy()
    assert image.shape == (8, 8, 4)
    for i in range(8):
        for j in range(8):
            expected = ALIVE_COLOR if cells[i // 2, j // 2] else DEAD_COLOR
            np.testing.assert_allclose(image[i, j], expected)


@test_utils.test()
def test_every_pixel_is_covered():
    # Pixels on the shared diagonal belong to one of the two triangles
    cells = np.ones((5, 3), dtype=bool)
    presenter = Presenter((15, 15))
    image = presenter.present(_generation(cells)).to_numpy()
    np.testing.assert_allclose(image, np.broadcast_to(ALIVE_COLOR, image.shape))


@test_utils.test()
def test_partial_quad_leaves_clear_color():
    cells = np.ones((4, 4), dtype=bool)
    # Right half of the target only
    presenter = Presenter((8, 8), quad=((0.0, -1.0), (1.0, -1.0), (1.0, 1.0), (0.0, 1.0)))
    image = presenter.present(_generation(cells)).to_numpy()
    np.testing.assert_allclose(image[:4], np.broadcast_to(CLEAR_COLOR, image[:4].shape))
    np.testing.assert_allclose(image[4:], np.broadcast_to(ALIVE_COLOR, image[4:].shape))


@test_utils.test()
def test_present_does_not_touch_the_generation():
    sim = test_utils.make_simulation()
    before = sim.generations.current.to_numpy()
    other = sim.generations.next.to_numpy()
    presenter = Presenter(sim.config.window_res)
    presenter.present(sim.current)
    presenter.present(sim.current)
    np.testing.assert_array_equal(sim.generations.current.to_numpy(), before)
    np.testing.assert_array_equal(sim.generations.next.to_numpy(), other)
    assert sim.tick == 0


@test_utils.test()
def test_present_follows_the_current_generation():
    sim = test_utils.make_simulation(test_utils.place((6, 6), "blinker", 1, 2))
    presenter = Presenter((6, 6))
    for _ in range(3):
        image = presenter.present(sim.current).to_numpy()
        np.testing.assert_array_equal(image[..., 0] == 1.0, sim.to_numpy())
        sim.step()


@test_utils.test()
def test_invalid_quads():
    presenter = Presenter((4, 4))
    with pytest.raises(ConfigError):
        presenter.set_quad(((0.0, 0.0), (1.0, 0.0), (1.0, 1.0)))
    with pytest.raises(ConfigError):
        presenter.set_quad(((0.0, 0.0), (0.0, 0.0), (1.0, 1.0), (0.0, 1.0)))
    with pytest.raises(ConfigError):
        presenter.set_quad(((0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0)))
