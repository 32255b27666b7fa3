import numpy as np
import pytest

from conway import patterns


def test_parse_puts_the_first_row_on_top():
    cells = patterns.parse(
        """
        O..
        .OO
        """
    )
    assert cells.shape == (3, 2)
    assert cells[0, 1]
    assert cells[1, 0] and cells[2, 0]
    assert cells.sum() == 3


def test_parse_pads_short_rows():
    cells = patterns.parse("!comment\nOOO\nO\n")
    assert cells.shape == (3, 2)
    np.testing.assert_array_equal(cells[:, 0], [True, False, False])


@pytest.mark.parametrize("text", ["", "\n\n", "OX."])
def test_parse_rejects_bad_patterns(text):
    with pytest.raises(ValueError):
        patterns.parse(text)


def test_builtin_patterns():
    assert "glider" in patterns.names()
    sizes = {"block": 4, "blinker": 3, "toad": 6, "beacon": 8, "glider": 5, "r_pentomino": 5}
    for name, alive in sizes.items():
        assert patterns.get(name).sum() == alive

    with pytest.raises(KeyError):
        patterns.get("gosper_gun")


def test_stamp():
    grid = np.zeros((5, 5), dtype=bool)
    patterns.stamp(grid, patterns.get("blinker"), 3, 0)
    assert grid[3, 0] and grid[4, 0] and grid[0, 0]

    grid = np.zeros((5, 5), dtype=bool)
    patterns.stamp(grid, patterns.get("blinker"), 3, 0, wrap=False)
    assert grid.sum() == 2
