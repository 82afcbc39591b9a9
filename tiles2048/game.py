import logging
import random

from tiles2048.grid import (
    DIRECTIONS,
    Direction,
    Grid,
    copy_grid,
    empty_grid,
    has_moves,
    max_tile,
    move,
    validate_grid,
)
from tiles2048.spawn import spawn_tile

logger = logging.getLogger(__name__)


class Game:
    """2048 game session: grid, score and game-over flag"""

    state: Grid
    score: int
    over: bool

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)
        self.state = empty_grid()
        self.score = 0
        self.over = False
        self.moves = 0
        spawn_tile(self.state, self._rng)
        spawn_tile(self.state, self._rng)

    @classmethod
    def from_grid(cls, grid, score: int = 0, seed: int | None = None) -> "Game":
        """Start a session from an existing grid instead of two random tiles."""
        if score < 0:
            raise ValueError(f"Score must be non-negative, got {score}")
        g = cls.__new__(cls)
        g._rng = random.Random(seed)
        g.state = validate_grid(grid)
        g.score = score
        g.over = not has_moves(g.state)
        g.moves = 0
        return g

    @property
    def grid(self) -> Grid:
        return copy_grid(self.state)

    def move(self, direction) -> bool:
        """
        Play a move in the game. Return whether the move was legal.

        A move that changes nothing, or any move once the game is over,
        leaves the session untouched.
        """
        direction = Direction.parse(direction)
        if self.over:
            return False

        result = move(self.state, direction)
        if not result.changed:
            return False

        state = result.grid
        spawn_tile(state, self._rng)
        over = not has_moves(state)

        self.state = state
        self.score += result.score
        self.over = over
        self.moves += 1

        logger.debug(
            "move %s: +%d (score %d, max tile %d)",
            direction.value,
            result.score,
            self.score,
            max_tile(state),
        )
        if over:
            logger.debug("game over after %d moves, score %d", self.moves, self.score)
        return True

    def valid(self, direction) -> bool:
        if self.over:
            return False
        return move(self.state, Direction.parse(direction)).changed

    def legal_moves(self) -> list[Direction]:
        return [d for d in DIRECTIONS if self.valid(d)]

    def alive(self) -> bool:
        return not self.over

    def max_tile(self) -> int:
        return max_tile(self.state)

    def clone(self) -> "Game":
        g = Game.__new__(Game)
        g._rng = random.Random()
        g._rng.setstate(self._rng.getstate())
        g.state = copy_grid(self.state)
        g.score = self.score
        g.over = self.over
        g.moves = self.moves
        return g

    def display(self):
        for row in self.state:
            print(" ".join(f"{v if v else '.':>5}" for v in row))
        print(f"Score: {self.score}")


def init_session(seed: int | None = None) -> Game:
    return Game(seed)


def apply_move(game: Game, direction) -> Game:
    """Play one turn on ``game`` and return it."""
    game.move(direction)
    return game
