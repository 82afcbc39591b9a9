import copy

import pytest

from tiles2048.grid import (
    DIRECTIONS,
    Direction,
    empty_cells,
    empty_grid,
    has_moves,
    max_tile,
    move,
    rotate,
    slide_and_merge,
    validate_grid,
)

NUMBERED = [
    [1, 2, 3, 4],
    [5, 6, 7, 8],
    [9, 10, 11, 12],
    [13, 14, 15, 16],
]

DEAD = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2],
]


@pytest.mark.parametrize(
    "line, expected, score",
    [
        ([2, 2, 0, 0], [4, 0, 0, 0], 4),
        ([2, 0, 2, 2], [4, 2, 0, 0], 4),
        ([4, 4, 4, 4], [8, 8, 0, 0], 16),
        ([0, 0, 0, 0], [0, 0, 0, 0], 0),
        ([0, 2, 0, 4], [2, 4, 0, 0], 0),
        ([2, 2, 2, 0], [4, 2, 0, 0], 4),
        ([4, 4, 8, 0], [8, 8, 0, 0], 8),
        ([2, 4, 4, 4], [2, 8, 4, 0], 8),
        ([8, 8, 16, 16], [16, 32, 0, 0], 48),
    ],
)
def test_slide_and_merge(line, expected, score):
    assert slide_and_merge(line) == (expected, score)


@pytest.mark.parametrize(
    "line",
    [[2, 2, 0, 0], [2, 0, 2, 2], [4, 4, 4, 4], [2, 4, 8, 16], [0, 0, 0, 2], [16, 16, 2, 2]],
)
def test_slide_and_merge_keeps_tile_mass(line):
    new, _ = slide_and_merge(line)
    assert sum(new) == sum(line)
    assert len(new) == len(line)


def test_slide_and_merge_without_merges_scores_nothing():
    new, score = slide_and_merge([0, 2, 0, 4])
    assert score == 0
    assert new != [0, 2, 0, 4]


def test_rotate_clockwise():
    assert rotate(NUMBERED) == [
        [13, 9, 5, 1],
        [14, 10, 6, 2],
        [15, 11, 7, 3],
        [16, 12, 8, 4],
    ]


def test_rotate_four_times_is_identity():
    g = NUMBERED
    for _ in range(4):
        g = rotate(g)
    assert g == NUMBERED


def test_rotate_negative_is_inverse():
    for times in range(4):
        assert rotate(rotate(NUMBERED, times), -times) == NUMBERED


def test_rotate_does_not_alias_input():
    g = rotate(NUMBERED, 0)
    g[0][0] = 99
    assert NUMBERED[0][0] == 1


SAMPLE = [
    [2, 0, 0, 0],
    [2, 0, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 4],
]


@pytest.mark.parametrize(
    "direction, expected, score",
    [
        (
            Direction.UP,
            [[4, 0, 0, 4], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
            4,
        ),
        (
            Direction.DOWN,
            [[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [4, 0, 0, 4]],
            4,
        ),
        (
            Direction.LEFT,
            [[2, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0], [4, 0, 0, 0]],
            0,
        ),
        (
            Direction.RIGHT,
            [[0, 0, 0, 2], [0, 0, 0, 2], [0, 0, 0, 0], [0, 0, 0, 4]],
            0,
        ),
    ],
)
def test_move_directions(direction, expected, score):
    result = move(SAMPLE, direction)
    assert result.grid == expected
    assert result.changed
    assert result.score == score


def test_move_does_not_mutate_input():
    before = copy.deepcopy(SAMPLE)
    for direction in DIRECTIONS:
        move(SAMPLE, direction)
    assert SAMPLE == before


def test_move_unchanged_grid():
    grid = [
        [2, 4, 0, 0],
        [8, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ]
    result = move(grid, Direction.LEFT)
    assert not result.changed
    assert result.grid == grid
    assert result.score == 0
    assert move(grid, Direction.UP).changed is False


def test_move_accepts_direction_names():
    assert move(SAMPLE, "up") == move(SAMPLE, Direction.UP)


def test_move_rejects_unknown_direction():
    with pytest.raises(ValueError):
        move(SAMPLE, "north")


def test_move_merges_once_per_tile_in_columns():
    grid = [
        [2, 0, 0, 0],
        [2, 0, 0, 0],
        [2, 0, 0, 0],
        [2, 0, 0, 0],
    ]
    result = move(grid, Direction.DOWN)
    assert [row[0] for row in result.grid] == [0, 0, 4, 4]
    assert result.score == 8


def test_move_score_sums_all_rows():
    grid = [
        [2, 2, 0, 0],
        [4, 4, 4, 4],
        [0, 0, 0, 0],
        [8, 0, 0, 8],
    ]
    result = move(grid, Direction.LEFT)
    assert result.score == 4 + 16 + 16
    assert sum(map(sum, result.grid)) == sum(map(sum, grid))


@pytest.mark.parametrize(
    "value, expected",
    [
        (Direction.LEFT, Direction.LEFT),
        ("up", Direction.UP),
        ("DOWN", Direction.DOWN),
        (" right ", Direction.RIGHT),
        (0, Direction.UP),
        (3, Direction.RIGHT),
    ],
)
def test_direction_parse(value, expected):
    assert Direction.parse(value) is expected


@pytest.mark.parametrize("value", ["north", "", 4, -1, True, None, 1.5])
def test_direction_parse_rejects(value):
    with pytest.raises(ValueError):
        Direction.parse(value)


def test_direction_index_round_trip():
    for i, direction in enumerate(DIRECTIONS):
        assert direction.index == i
        assert Direction.parse(i) is direction


def test_has_moves_with_empty_cell():
    grid = [row[:] for row in DEAD]
    grid[1][2] = 0
    assert has_moves(grid)


def test_has_moves_dead_grid():
    assert not has_moves(DEAD)
    for direction in DIRECTIONS:
        assert not move(DEAD, direction).changed


def test_has_moves_horizontal_pair():
    grid = [row[:] for row in DEAD]
    grid[3][3] = 4
    assert has_moves(grid)
    assert move(grid, Direction.RIGHT).changed


def test_has_moves_vertical_pair():
    grid = [row[:] for row in DEAD]
    grid[0][0] = 4
    assert has_moves(grid)
    assert move(grid, Direction.UP).changed


def test_has_moves_empty_grid():
    assert has_moves(empty_grid())


def test_helpers():
    assert empty_cells(SAMPLE) == [
        (0, 1), (0, 2), (0, 3),
        (1, 1), (1, 2), (1, 3),
        (2, 0), (2, 1), (2, 2), (2, 3),
        (3, 0), (3, 1), (3, 2),
    ]
    assert max_tile(SAMPLE) == 4
    assert empty_cells(DEAD) == []


def test_validate_grid():
    assert validate_grid(tuple(tuple(row) for row in SAMPLE)) == SAMPLE


@pytest.mark.parametrize(
    "grid",
    [
        [[0] * 4] * 3,
        [[0] * 3] * 4,
        [[0, 0, 0, 3]] + [[0] * 4] * 3,
        [[0, 0, 0, 1]] + [[0] * 4] * 3,
        [[0, 0, 0, -2]] + [[0] * 4] * 3,
        [[0, 0, 0, 2.0]] + [[0] * 4] * 3,
    ],
)
def test_validate_grid_rejects(grid):
    with pytest.raises(ValueError):
        validate_grid(grid)
