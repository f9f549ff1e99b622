"""
Minesweeper Solver - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt
import streamlit as st
from typing import Optional, Tuple

from minesolver import (
    DIFFICULTY_SETTINGS,
    Board,
    Cell,
    CellState,
    MinesweeperSolver,
    SolveResult,
    replay_moves,
)
from minesolver.analysis import format_move_log, plot_probability_map

NUMBER_COLORS = {
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}

PRESETS = {
    f"{difficulty.name.title()} ({w}x{h}, {m})": (w, h, m)
    for difficulty, (w, h, m) in DIFFICULTY_SETTINGS.items()
}
CUSTOM = "Custom"

# (minimum board width, cell size in px, font size)
CELL_SIZES = ((30, 14, "10px"), (25, 16, "11px"), (16, 20, "13px"), (0, 26, "15px"))


def _cell_style(c: Cell, show_mines: bool) -> Tuple[str, str, str]:
    """Return (text, background, foreground) for one cell."""
    if c.state == CellState.FLAGGED:
        return "F", "#ffa500", "#ffffff"
    if c.state == CellState.REVEALED and c.is_mine:
        return "M", "#ff0000", "#ffffff"
    if c.state == CellState.REVEALED:
        if not c.adjacent_mines:
            return " ", "#f0f0f0", "#000000"
        text = str(c.adjacent_mines)
        return text, "#ffffff", NUMBER_COLORS.get(text, "#000000")
    if show_mines and c.is_mine:
        return "M", "#ffcccc", "#ff0000"
    return ".", "#c0c0c0", "#666666"


def render_board_html(
    board: Board,
    highlight_cell: Optional[Tuple[int, int]] = None,
    show_mines: bool = False,
) -> str:
    """Render the board as an HTML table, optionally outlining one cell."""
    cell_size, font_size = next(
        (size, font) for min_width, size, font in CELL_SIZES if board.width >= min_width
    )

    rows = []
    for y in range(board.height):
        tds = []
        for x in range(board.width):
            text, bg, fg = _cell_style(board.cells[x][y], show_mines)
            border = "2px solid #ff0000" if (x, y) == highlight_cell else "1px solid #999"
            tds.append(
                f'<td style="width: {cell_size}px; height: {cell_size}px; '
                f"text-align: center; background: {bg}; border: {border}; "
                f'color: {fg}; font-weight: bold; font-size: {font_size};">{text}</td>'
            )
        rows.append("<tr>" + "".join(tds) + "</tr>")

    return (
        '<div style="font-family: monospace; line-height: 1.2;">'
        '<table style="border-collapse: collapse; margin: auto;">'
        + "".join(rows)
        + "</table></div>"
    )


def shown_board(board: Board, result: Optional[SolveResult], step: int) -> Board:
    """Board as it stands after the first ``step`` moves of ``result``."""
    if result is None or step <= 0:
        return board
    return replay_moves(board, result.moves[:step])


def _new_board(width: int, height: int, mines: int, seed: Optional[int]) -> None:
    st.session_state.board = Board(width, height, mines, seed=seed)
    st.session_state.result = None
    st.session_state.hint = None
    st.session_state.current_step = 0


def main():
    st.set_page_config(
        page_title="Minesweeper Solver",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper Solver")
    st.markdown("""
    Deduction-first Minesweeper solver with probability-based guessing as a fallback.
    """)

    st.sidebar.header("Board")

    preset = st.sidebar.selectbox("Preset", [*PRESETS, CUSTOM])
    if preset == CUSTOM:
        width = st.sidebar.slider("Columns", 5, 30, 16)
        height = st.sidebar.slider("Rows", 5, 30, 16)
        max_mines = width * height - 1
        mines = st.sidebar.slider("Mine count", 1, max_mines, min(40, max_mines))
    else:
        width, height, mines = PRESETS[preset]

    seed_value = st.sidebar.number_input(
        "Seed (-1 = random)", min_value=-1, value=-1, step=1,
    )
    seed = None if seed_value < 0 else int(seed_value)

    max_moves = st.sidebar.slider("Move ceiling", 100, 2000, 1000, step=100)
    use_probability = st.sidebar.checkbox(
        "Guess when stuck", value=True,
        help="Fall back to probability-based guessing when no certain move exists.",
    )
    solver = MinesweeperSolver(max_moves=max_moves, use_probability=use_probability)

    # Auto-generate new board when settings change
    current_settings = (width, height, mines, seed)
    if st.session_state.get("prev_settings") != current_settings:
        _new_board(width, height, mines, seed)
        st.session_state.prev_settings = current_settings

    board: Board = st.session_state.board
    result = st.session_state.result

    col1, col2 = st.columns([3, 1])

    with col1:
        st.subheader("Game Board")

        btn_col1, btn_col2, btn_col3 = st.columns(3)
        with btn_col1:
            if st.button("Regenerate Board", type="primary"):
                _new_board(width, height, mines, seed)
                st.rerun()
        with btn_col3:
            if st.button("Solve"):
                st.session_state.result = solver.solve(board)
                st.session_state.current_step = len(st.session_state.result.moves)
                st.session_state.hint = None
                st.rerun()

        step = 0
        highlight: Optional[Tuple[int, int]] = None

        if result is not None and result.moves:
            total_steps = len(result.moves)
            step = st.slider("Step", 0, total_steps, st.session_state.current_step)
            st.session_state.current_step = step
            if step > 0:
                move = result.moves[step - 1]
                highlight = (move.x, move.y)
                st.info(
                    f"**Step {step}/{total_steps}**: {move} "
                    f"— *{result.move_strategies[step - 1]}*"
                )

        shown = shown_board(board, result, step)

        with btn_col2:
            if st.button("Hint"):
                st.session_state.hint = (step, solver.hint(shown))

        # A hint is only valid for the step it was computed on
        if st.session_state.hint is not None and st.session_state.hint[0] == step:
            hint = st.session_state.hint[1]
            if hint is None:
                st.warning("No certain move from this position.")
            else:
                highlight = (hint.x, hint.y)
                st.info(f"Hint: {hint}")

        st.markdown(
            render_board_html(shown, highlight, show_mines=shown.is_over),
            unsafe_allow_html=True,
        )

        if result is not None:
            if result.success:
                st.success("Solved! All safe cells revealed.")
            else:
                st.error(f"Not solved ({result.stop_reason}).")

    with col2:
        st.subheader("Solver Statistics")

        if result is not None:
            st.metric("Result", "Win" if result.success else "Loss")
            st.metric("Moves", result.move_count)
            st.metric("Guesses", result.guess_count)
            st.metric("Time", f"{result.solution_time.total_seconds() * 1000:.1f} ms")

            st.markdown("---")
            st.markdown("**Moves by strategy**")
            for name, count in result.strategy_counts.items():
                st.text(f"{name}: {count}")

            with st.expander("Move log"):
                st.text(format_move_log(result.moves))
        else:
            st.info("Run the solver to see statistics.")

        if shown.revealed_count and not shown.is_over:
            st.markdown("---")
            fig, ax = plt.subplots()
            plot_probability_map(shown, ax=ax)
            st.pyplot(fig)


if __name__ == "__main__":
    main()
