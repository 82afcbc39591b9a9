from tiles2048.game import apply_move, init_session
from tiles2048.grid import Direction


if __name__ == "__main__":
    game = init_session()

    key_mapping = {
        "w": Direction.UP,
        "d": Direction.RIGHT,
        "s": Direction.DOWN,
        "a": Direction.LEFT,
    }

    game.display()

    while game.alive():
        key = input()
        if key in key_mapping:
            apply_move(game, key_mapping[key])
            game.display()
        else:
            break

    if game.over:
        print(f"Game over! Final score: {game.score}")
