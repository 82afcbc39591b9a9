import random

from tiles2048.grid import Grid, empty_cells

NEW_TILE_VALUES = [2, 4]
NEW_TILE_WEIGHTS = [0.9, 0.1]


def new_tile_value(rng: random.Random) -> int:
    return rng.choices(NEW_TILE_VALUES, NEW_TILE_WEIGHTS)[0]


def spawn_tile(grid: Grid, rng: random.Random) -> tuple[int, int] | None:
    """
    Put a new tile on a uniformly chosen empty cell, in place.

    Returns the cell that was filled, or None when the grid is full.
    """
    places = empty_cells(grid)
    if len(places) == 0:
        return None
    r, c = rng.choice(places)
    grid[r][c] = new_tile_value(rng)
    return r, c
