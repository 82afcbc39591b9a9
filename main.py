import logging
import statistics

import torch

from tiles2048.vec_game import VectorizedGame


def rollout(vec_game: VectorizedGame, max_steps: int) -> int:
    """Play uniformly random legal moves until every board is finished."""
    steps = 0
    while not vec_game.over.all() and steps < max_steps:
        all_next_states = vec_game.get_moves()
        valid_actions = vec_game.get_valid_actions(all_next_states)

        # finished boards have no legal move, any action is a no-op for them
        valid_actions[valid_actions.sum(dim=1) == 0] = 1.0

        actions = torch.multinomial(valid_actions, 1, generator=vec_game.generator)
        vec_game.step(actions.squeeze(1), all_next_states)
        steps += 1
    return steps


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")

    rollout_cfg = {
        "num_envs": 1024,
        "max_steps": 20000,
        "seed": 0,
    }

    device = torch.device("mps" if torch.backends.mps.is_available() else "cpu")
    print(f"Using device: {device}")

    vec_game = VectorizedGame(rollout_cfg["num_envs"], device, seed=rollout_cfg["seed"])
    steps = rollout(vec_game, rollout_cfg["max_steps"])

    scores = vec_game.scores.tolist()
    max_tiles = vec_game.board.view(vec_game.num_envs, -1).amax(dim=1).tolist()

    print(f"Played {len(scores)} games in {steps} steps")
    print(f"Score: mean {statistics.mean(scores):.1f}, median {statistics.median(scores)}, max {max(scores)}")
    for tile in sorted(set(max_tiles)):
        print(f"  max tile {tile:>5}: {max_tiles.count(tile)} games")
