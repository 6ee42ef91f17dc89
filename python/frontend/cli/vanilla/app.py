"""Vanilla terminal frontend — no third-party dependencies.

Uses only stdlib (print, ANSI codes, tty/termios) for rendering and input.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path

from backend.engine.gameplay import PuzzleEngine
from backend.engine.levelloader import Level
from backend.models.cell import Cell, Direction
from backend.models.grid import Position
from backend.models.highscore import HighScoreEntry, HighScoreManager
from frontend.cli.input_handler import DIRECTIONS, get_key_timeout


# -- ANSI helpers -------------------------------------------------------------

_G = "\033[32;1m"    # bold green
_Y = "\033[33;1m"    # bold yellow
_C = "\033[36;1m"    # bold cyan
_B = "\033[34m"      # blue
_DIM = "\033[2m"     # dim
_BOLD = "\033[1m"    # bold
_R = "\033[0m"       # reset

_TILES: dict[Cell, str] = {
    Cell.WALL: f"{_B}#{_R}",
    Cell.FLOOR: " ",
    Cell.TARGET: f"{_C}·{_R}",
    Cell.CRATE: f"{_Y}▣{_R}",
    Cell.CRATE_ON_TARGET: f"{_G}▣{_R}",
}

_PLAYER: dict[Direction, str] = {
    Direction.UP: "^",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
    Direction.RIGHT: ">",
}


def _clear() -> None:
    sys.stdout.write("\033[2J\033[H")
    sys.stdout.flush()


def _stats_line(engine: PuzzleEngine) -> str:
    """Return the formatted Moves + Time string (no newline)."""
    return (
        f"  Moves: {_Y}{engine.moves}{_R}  |  "
        f"Time: {_Y}{engine.elapsed_time_string}{_R}  |  "
        f"Crates: {_Y}{engine.crates_on_targets}/{engine.crate_count}{_R}"
    )


# -- board rendering ----------------------------------------------------------


def _render_board(engine: PuzzleEngine) -> str:
    """Return an ANSI-coloured text representation of the grid."""
    lines: list[str] = []
    for y, row in enumerate(engine.grid.rows()):
        cells: list[str] = []
        for x, cell in enumerate(row):
            if Position(x, y) == engine.player:
                cells.append(f"{_BOLD}{_PLAYER[engine.facing]}{_R}")
            else:
                cells.append(_TILES[cell])
        lines.append("  " + " ".join(cells))
    return "\n".join(lines)


# -- screens ------------------------------------------------------------------


def _show_game(engine: PuzzleEngine, status: str = "", show_help: bool = False) -> None:
    """Draw the full game screen.

    The stats line is printed last, with no trailing newline, so
    ``_update_time`` can overwrite it in-place using ``\\r\\033[K``.
    """
    _clear()
    print(f"  {_C}=== Sokoban: {engine.name} ==={_R}")
    print()
    print(_render_board(engine))
    print()
    if engine.is_won:
        print(f"  {_G}★ You Win! Solved in {engine.moves} moves. ★{_R}")
        print()
    print(
        f"  {_C}WASD{_R}/{_C}Arrows{_R}: move  |  "
        f"{_C}X{_R}: undo  |  {_C}Y{_R}: redo  |  "
        f"{_C}R{_R}: restart  |  {_C}Q{_R}: quit"
    )
    if show_help:
        print(
            f"  {_DIM}Push every crate ({_Y}▣{_R}{_DIM}) onto a target "
            f"({_C}·{_R}{_DIM}). Crates can be pushed, never pulled.{_R}"
        )
    if status:
        print(f"  {status}")
    sys.stdout.write(f"\n{_stats_line(engine)}")
    sys.stdout.flush()


def _update_time(engine: PuzzleEngine) -> None:
    """Overwrite just the stats (last) line in-place."""
    sys.stdout.write(f"\r\033[K{_stats_line(engine)}")
    sys.stdout.flush()


def _record_win(engine: PuzzleEngine, manager: HighScoreManager) -> str:
    sys.stdout.write("\a")  # terminal bell as the victory cue
    manager.add_score(
        engine.name,
        HighScoreEntry(
            moves=engine.moves,
            time=round(engine.elapsed_time, 2),
            date=datetime.now().strftime("%Y-%m-%d %H:%M"),
        ),
    )
    return f"{_DIM}Score saved!{_R}"


# -- game loop ----------------------------------------------------------------


def _play_level(level: Level, manager: HighScoreManager) -> None:
    engine = PuzzleEngine.from_level(level)
    status = ""
    show_help = False
    last_tick = time.monotonic()

    while True:
        _show_game(engine, status, show_help)
        status = ""

        # Wait for input; update the time display every 0.5 s.
        while True:
            key = get_key_timeout(0.5)
            now = time.monotonic()
            if not engine.is_won:
                engine.update_elapsed_time(now - last_tick)
            last_tick = now
            if key is not None:
                break
            _update_time(engine)

        if key in DIRECTIONS:
            if not engine.move(DIRECTIONS[key]) and not engine.is_won:
                status = f"{_DIM}Blocked.{_R}"
        elif key == "undo":
            if not engine.undo():
                status = f"{_DIM}Nothing to undo.{_R}"
        elif key == "redo":
            if not engine.redo():
                status = f"{_DIM}Nothing to redo.{_R}"
        elif key == "restart":
            engine.reset()
            status = f"{_Y}Restarted.{_R}"
        elif key == "help":
            show_help = not show_help
        elif key == "quit":
            _clear()
            print("  Goodbye!\n")
            return

        if engine.consume_win_event():
            status = _record_win(engine, manager)


# -- public entry point -------------------------------------------------------


def run(level: Level, data_dir: Path) -> None:
    """Launch the vanilla CLI on *level*."""
    manager = HighScoreManager(data_dir / "highscores.json")
    _play_level(level, manager)
