"""
Grid primitives for 2048: directions, rotation, slide-and-merge, moves and
terminal detection.

Every function here is pure: grids come in as ``list[list[int]]`` and new
grids go out. Only the four directions need special handling, and they are
reduced to a single "slide left" by rotating the grid first and rotating it
back afterwards.
"""

from enum import Enum
from typing import NamedTuple, Sequence

SIZE = 4

Grid = list[list[int]]


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value) -> "Direction":
        """
        Accept a Direction, its name (case-insensitive) or its index in
        ``list(Direction)``. Anything else is a caller error.
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        elif isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(DIRECTIONS):
                return DIRECTIONS[value]
        raise ValueError(f"Invalid direction: {value!r}")

    @property
    def index(self) -> int:
        return DIRECTIONS.index(self)


DIRECTIONS = list(Direction)

# Clockwise quarter turns that make each direction a left slide.
_TURNS = {
    Direction.LEFT: 0,
    Direction.DOWN: 1,
    Direction.RIGHT: 2,
    Direction.UP: 3,
}


class MoveResult(NamedTuple):
    grid: Grid
    changed: bool
    score: int


def empty_grid() -> Grid:
    return [[0] * SIZE for _ in range(SIZE)]


def copy_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def empty_cells(grid: Grid) -> list[tuple[int, int]]:
    return [
        (r, c) for r in range(len(grid)) for c in range(len(grid[r])) if grid[r][c] == 0
    ]


def max_tile(grid: Grid) -> int:
    return max(max(row) for row in grid)


def validate_grid(grid) -> Grid:
    """
    Check that ``grid`` is a 4x4 board of empty cells and powers of two, and
    return it as a fresh list of lists.
    """
    rows = [list(row) for row in grid]
    if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
        raise ValueError(f"Grid must be {SIZE}x{SIZE}")
    for row in rows:
        for value in row:
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Grid cells must be integers, got {value!r}")
            if value < 0:
                raise ValueError(f"Grid cells must be non-negative, got {value}")
            if value == 1 or value & (value - 1):
                raise ValueError(f"Tile {value} is not a power of two >= 2")
    return rows


def rotate(grid: Grid, times: int = 1) -> Grid:
    """Rotate clockwise by ``times`` quarter turns: (r, c) -> (c, N-1-r)."""
    for _ in range(times % 4):
        grid = [list(row) for row in zip(*grid[::-1])]
    return copy_grid(grid) if times % 4 == 0 else grid


def slide_and_merge(line: Sequence[int]) -> tuple[list[int], int]:
    """
    Slide a line towards index 0 and merge equal neighbours.

    The scan goes left to right and the first matching pair wins, so a tile
    merges at most once: ``[2, 0, 2, 2]`` becomes ``[4, 2, 0, 0]``.

    Returns the new line and the sum of the merged tile values.
    """
    values = [v for v in line if v != 0]
    merged = []
    score = 0
    i = 0
    while i < len(values):
        if i + 1 < len(values) and values[i] == values[i + 1]:
            merged.append(values[i] * 2)
            score += values[i] * 2
            i += 2
        else:
            merged.append(values[i])
            i += 1
    merged += [0] * (len(line) - len(merged))
    return merged, score


def move(grid: Grid, direction: Direction) -> MoveResult:
    """
    Slide the whole grid in ``direction``. The input grid is not modified.

    ``changed`` tells whether any cell differs from the input; a move that
    changes nothing is not a legal turn.
    """
    direction = Direction.parse(direction)
    turns = _TURNS[direction]

    rotated = rotate(grid, turns)
    score = 0
    for r, row in enumerate(rotated):
        rotated[r], row_score = slide_and_merge(row)
        score += row_score
    result = rotate(rotated, -turns)

    changed = result != grid
    return MoveResult(result, changed, score)


def has_moves(grid: Grid) -> bool:
    """True if a cell is empty or equals its right or down neighbour."""
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r][c] == 0:
                return True
            if c + 1 < SIZE and grid[r][c] == grid[r][c + 1]:
                return True
            if r + 1 < SIZE and grid[r][c] == grid[r + 1][c]:
                return True
    return False
