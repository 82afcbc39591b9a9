import streamlit as st
import numpy as np
import pandas as pd

from tiles2048.game import apply_move, init_session
from tiles2048.grid import Direction

SHARE_URL = "https://play2048.co"


def display_2048_board(board):
    """
    Display a 2048 game board in Streamlit with proper styling.

    Parameters:
    board (numpy.ndarray or list): A 4x4 array representing the 2048 game board,
                                  where 0 represents an empty cell.
    """
    board = np.array(board)

    if board.shape != (4, 4):
        st.error("Board must be 4x4. Current shape: " + str(board.shape))
        return

    color_map = {
        0: "#CDC1B4",
        2: "#EEE4DA",
        4: "#EDE0C8",
        8: "#F2B179",
        16: "#F59563",
        32: "#F67C5F",
        64: "#F65E3B",
        128: "#EDCF72",
        256: "#EDCC61",
        512: "#EDC850",
        1024: "#EDC53F",
        2048: "#EDC22E",
    }
    # past 2048
    default_color = "#3C3A32"

    st.markdown("""
    <style>
    .tile-container {
        background-color: #BBADA0;
        border-radius: 6px;
        padding: 10px;
        width: fit-content;
    }
    .tile {
        width: 80px;
        height: 80px;
        margin: 4px;
        border-radius: 3px;
        display: flex;
        justify-content: center;
        align-items: center;
        font-family: 'Arial', sans-serif;
        font-weight: bold;
        font-size: 24px;
        color: #776E65;
    }
    .value-0 {
        color: transparent;
    }
    .value-high {
        color: #F9F6F2;
    }
    </style>
    """, unsafe_allow_html=True)

    s = '<div class="tile-container">'
    for row in board:
        s += '<div style="display: flex;">'
        for value in row:
            bg_color = color_map.get(int(value), default_color)
            text_class = "value-0" if value == 0 else "value-high" if value >= 8 else ""
            display_text = "" if value == 0 else str(value)
            s += f'<div class="tile {text_class}" style="background-color: {bg_color};">{display_text}</div>'
        s += "</div>"
    s += "</div>"

    st.markdown(s, unsafe_allow_html=True)


def play(direction: Direction):
    game = st.session_state.game
    score_before = game.score
    moves_before = game.moves
    apply_move(game, direction)
    if game.moves != moves_before:
        st.session_state.history.append(
            {
                "move": game.moves,
                "direction": direction.value,
                "gained": game.score - score_before,
                "score": game.score,
                "max tile": game.max_tile(),
            }
        )


def new_game():
    st.session_state.game = init_session()
    st.session_state.history = []


if __name__ == "__main__":
    st.title("2048")

    if "game" not in st.session_state:
        new_game()

    game = st.session_state.game

    cols = st.columns(4)
    buttons = [("↑", Direction.UP), ("←", Direction.LEFT), ("→", Direction.RIGHT), ("↓", Direction.DOWN)]
    for col, (label, direction) in zip(cols, buttons):
        with col:
            st.button(label, on_click=play, args=(direction,), disabled=game.over, use_container_width=True)

    display_2048_board(game.grid)

    st.markdown("---")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Score", game.score)
    with col2:
        st.metric("Highest Tile", game.max_tile())
    with col3:
        st.metric("Moves made", game.moves)

    if game.over:
        st.subheader("Game Over!")
        st.code(f"I scored {game.score} in 2048! {SHARE_URL}", language=None)

    st.button("New game", on_click=new_game)

    if st.session_state.history:
        st.dataframe(pd.DataFrame(st.session_state.history).iloc[::-1], hide_index=True)
