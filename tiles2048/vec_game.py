import logging

import torch

from tiles2048.grid import DIRECTIONS, SIZE, Direction
from tiles2048.spawn import NEW_TILE_WEIGHTS

logger = logging.getLogger(__name__)

# Counter-clockwise torch.rot90 turns that make each direction a left slide.
_ROT90 = {
    Direction.UP: 1,
    Direction.DOWN: -1,
    Direction.LEFT: 0,
    Direction.RIGHT: 2,
}


class VectorizedGame:
    """
    Many independent 2048 boards stepped together on one device.

    Actions are indices into ``list(Direction)``: 0 up, 1 down, 2 left,
    3 right.
    """

    def __init__(self, num_envs, device, seed: int | None = None):
        self.num_envs = num_envs
        self.device = device
        self.generator = torch.Generator(device=device)
        if seed is not None:
            self.generator.manual_seed(seed)
        else:
            self.generator.seed()
        self.board = torch.zeros((num_envs, SIZE, SIZE), dtype=torch.int32, device=device)
        self.scores = torch.zeros(num_envs, dtype=torch.int64, device=device)
        self.over = torch.zeros(num_envs, dtype=torch.bool, device=device)
        self.reset()

    def set_states(self, env_indices, states):
        if len(env_indices) == 0:
            return
        self.board[env_indices] = states.to(self.device).to(self.board.dtype)
        self.over[env_indices] = self.get_done()[env_indices]

    def reset(self, env_indices=None):
        if env_indices is None:
            env_indices = torch.arange(self.num_envs, device=self.device)

        if len(env_indices) > 0:
            self.board[env_indices] = 0
            self.scores[env_indices] = 0
            self.over[env_indices] = False
            self.add_random_tile(env_indices)
            self.add_random_tile(env_indices)

    def add_random_tile(self, env_indices):
        # env_indices: (K,)
        if len(env_indices) == 0:
            return

        flat_boards = self.board[env_indices].view(-1, SIZE * SIZE)
        empty_mask = flat_boards == 0

        # full boards keep their tiles
        has_empty = empty_mask.any(dim=1)
        env_indices = env_indices[has_empty]
        flat_boards = flat_boards[has_empty]
        empty_mask = empty_mask[has_empty]
        if len(env_indices) == 0:
            return

        flat_indices = torch.multinomial(
            empty_mask.float(), 1, generator=self.generator
        ).squeeze(-1)  # (K,)

        four_prob = torch.full(
            (len(env_indices),), NEW_TILE_WEIGHTS[1], device=self.device
        )
        vals = (torch.bernoulli(four_prob, generator=self.generator) * 2 + 2).to(
            self.board.dtype
        )

        update_mask = torch.nn.functional.one_hot(flat_indices, SIZE * SIZE).bool()
        flat_boards[update_mask] = vals
        self.board[env_indices] = flat_boards.view(-1, SIZE, SIZE)

    def get_moves(self):
        """
        Next board and merge score for every direction.

        Returns ``(N, 4, 4, 4)`` boards and ``(N, 4)`` scores, both indexed by
        direction along dim 1.
        """
        boards = []
        scores = []
        for direction in DIRECTIONS:
            k = _ROT90[direction]
            b = torch.rot90(self.board, k, [1, 2])
            b, gained = self._move_left_batch(b)
            boards.append(torch.rot90(b, -k, [1, 2]))
            scores.append(gained)
        return torch.stack(boards, dim=1), torch.stack(scores, dim=1)

    def _shift_left(self, x):
        # x: (M, 4)
        mask = x != 0
        # stable sort descending puts True (non-zeros) first, preserving order
        _, indices = torch.sort(mask.int(), dim=1, descending=True, stable=True)
        return torch.gather(x, 1, indices)

    def _move_left_batch(self, board):
        # board: (N, 4, 4)
        x = self._shift_left(board.reshape(-1, SIZE))
        gained = torch.zeros(x.shape[0], dtype=torch.int64, device=x.device)

        # pairs are resolved left to right, a merged tile leaves a hole behind it
        for i in range(SIZE - 1):
            pair = (x[:, i] == x[:, i + 1]) & (x[:, i] != 0)
            x[pair, i] *= 2
            x[pair, i + 1] = 0
            gained += torch.where(pair, x[:, i].long(), torch.zeros_like(gained))

        x = self._shift_left(x)
        return x.view(-1, SIZE, SIZE), gained.view(-1, SIZE).sum(dim=1)

    def step(self, actions, all_next_states=None):
        # actions: (N,)
        if all_next_states is None:
            all_next_states = self.get_moves()
        next_boards, next_scores = all_next_states

        batch_indices = torch.arange(self.num_envs, device=self.device)
        next_states = next_boards[batch_indices, actions]  # (N, 4, 4)
        gained = next_scores[batch_indices, actions]

        # illegal moves and finished boards stay as they are
        is_valid = (
            next_states.view(self.num_envs, -1) != self.board.view(self.num_envs, -1)
        ).any(dim=1) & ~self.over

        self.board = torch.where(is_valid.view(-1, 1, 1), next_states, self.board)
        self.scores += torch.where(is_valid, gained, torch.zeros_like(gained))

        valid_indices = torch.nonzero(is_valid).squeeze(-1)
        self.add_random_tile(valid_indices)

        done = self.get_done()
        newly_over = done & ~self.over
        if newly_over.any():
            logger.debug("%d boards finished", int(newly_over.sum()))
        self.over |= done

        return self.board.clone(), is_valid

    def get_valid_actions(self, all_next_states=None):
        # Returns (N, 4) float mask, 1.0 where the move changes the board
        if all_next_states is None:
            all_next_states = self.get_moves()
        next_boards, _ = all_next_states
        current = self.board.unsqueeze(1)

        diff = (next_boards != current).view(self.num_envs, len(DIRECTIONS), -1).any(dim=2)
        return diff.float()

    def get_done(self):
        flat = self.board.view(self.num_envs, -1)
        has_empty = (flat == 0).any(dim=1)

        # a board with an empty cell always has a legal move
        if has_empty.all():
            return torch.zeros(self.num_envs, dtype=torch.bool, device=self.device)

        horizontal = (self.board[:, :, :-1] == self.board[:, :, 1:]).flatten(1).any(dim=1)
        vertical = (self.board[:, :-1, :] == self.board[:, 1:, :]).flatten(1).any(dim=1)
        return ~(has_empty | horizontal | vertical)
