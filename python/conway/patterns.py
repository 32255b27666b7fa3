import numpy as np

# Plaintext format: 'O' is alive, '.' is dead, first row is the top
_PATTERNS = {
    "block": """
OO
OO
""",
    "blinker": """
OOO
""",
    "toad": """
.OOO
OOO.
""",
    "beacon": """
OO..
OO..
..OO
..OO
""",
    "glider": """
.O.
..O
OOO
""",
    "r_pentomino": """
.OO
OO.
.O.
""",
}


def parse(text):
    """Parses a plaintext pattern into a bool array indexed ``[x, y]``, y up."""
    rows = [line.strip() for line in text.strip().splitlines() if line.strip() and not line.startswith("!")]
    if not rows:
        raise ValueError("Empty pattern")
    width = max(len(row) for row in rows)
    cells = np.zeros((width, len(rows)), dtype=bool)
    for r, row in enumerate(rows):
        for x, c in enumerate(row):
            if c not in "O.":
                raise ValueError(f"Invalid character {c!r} in pattern row {r}")
            cells[x, len(rows) - 1 - r] = c == "O"
    return cells


def get(name):
    if name not in _PATTERNS:
        raise KeyError(f"Unknown pattern {name!r}, available: {', '.join(sorted(_PATTERNS))}")
    return parse(_PATTERNS[name])


def names():
    return sorted(_PATTERNS)


def stamp(grid, pattern, x, y, wrap=True):
    """Writes the alive cells of ``pattern`` into ``grid`` with its lower-left corner at ``(x, y)``.

    With ``wrap`` the pattern continues across the opposite edges, otherwise
    cells falling outside the grid are dropped.
    """
    width, height = grid.shape
    px, py = np.nonzero(pattern)
    gx, gy = px + x, py + y
    if wrap:
        gx, gy = gx % width, gy % height
    else:
        keep = (0 <= gx) & (gx < width) & (0 <= gy) & (gy < height)
        gx, gy = gx[keep], gy[keep]
    grid[gx, gy] = True
    return grid


__all__ = ["parse", "get", "names", "stamp"]
