"""Rich terminal frontend — styled grid, panels, and a live clock.

Uses the ``rich`` library for styled output while sharing the same
input handler and backend as the vanilla CLI.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gameplay import PuzzleEngine
from backend.engine.levelloader import Level
from backend.models.cell import Cell, Direction
from backend.models.grid import Position
from backend.models.highscore import HighScoreEntry, HighScoreManager
from frontend.cli.input_handler import DIRECTIONS, get_key_timeout

console = Console()

_TILES: dict[Cell, tuple[str, str]] = {
    Cell.WALL: ("██", "bright_blue"),
    Cell.FLOOR: ("  ", ""),
    Cell.TARGET: ("()", "cyan"),
    Cell.CRATE: ("[]", "bold yellow"),
    Cell.CRATE_ON_TARGET: ("[]", "bold green"),
}

_PLAYER: dict[Direction, str] = {
    Direction.UP: "/\\",
    Direction.DOWN: "\\/",
    Direction.LEFT: "<<",
    Direction.RIGHT: ">>",
}


# -- board rendering ----------------------------------------------------------


def _render_board(engine: PuzzleEngine) -> Table:
    """Return a borderless Rich Table with one two-character column per cell."""
    table = Table(
        show_header=False,
        show_edge=False,
        box=None,
        padding=0,
        collapse_padding=True,
    )
    for _ in range(engine.width):
        table.add_column(width=2, no_wrap=True)

    for y, row in enumerate(engine.grid.rows()):
        cells: list[Text] = []
        for x, cell in enumerate(row):
            if Position(x, y) == engine.player:
                cells.append(Text(_PLAYER[engine.facing], style="bold magenta"))
            else:
                glyph, style = _TILES[cell]
                cells.append(Text(glyph, style=style))
        table.add_row(*cells)

    return table


def _stats(engine: PuzzleEngine) -> Text:
    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(engine.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(engine.elapsed_time_string, style="bold yellow")
    stats.append("    Crates: ", style="dim")
    stats.append(f"{engine.crates_on_targets}/{engine.crate_count}", style="bold yellow")
    return stats


# -- screens ------------------------------------------------------------------


def _draw_game(engine: PuzzleEngine, status: str = "", show_help: bool = False) -> None:
    console.clear()

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("X", style="bold cyan")
    controls.append("  undo   ", style="dim")
    controls.append("Y", style="bold cyan")
    controls.append("  redo   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  restart   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  quit", style="dim")

    body: list = [Align.center(_render_board(engine))]
    if engine.is_won:
        congrats = Text()
        congrats.append("\n  ★ ", style="bold yellow")
        congrats.append("YOU WIN!", style="bold green")
        congrats.append(f"  Solved in {engine.moves} moves  ", style="green")
        congrats.append("★", style="bold yellow")
        body.append(Align.center(congrats))

    border = "bold green" if engine.is_won else "bright_blue"
    panel = Panel(
        Group(*body),
        title=f"[bold cyan]Sokoban  {engine.name}[/bold cyan]",
        border_style=border,
        box=rich.box.HEAVY,
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    # Save cursor position right before the stats line so _update_time()
    # can later restore to this exact spot and overwrite only this line.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(_stats(engine)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))
    if show_help:
        console.print(
            Align.center(
                Text(
                    "Push every crate onto a target. Crates can be pushed, never pulled.",
                    style="dim",
                )
            )
        )


def _update_time(engine: PuzzleEngine) -> None:
    """Overwrite just the stats line using the saved cursor position.

    Uses raw ANSI codes (bypassing Rich) so only the single stats
    line is repainted — no flicker from a full redraw.
    """
    _DIM = "\033[2m"
    _YB = "\033[33;1m"
    _RS = "\033[0m"

    crates = f"{engine.crates_on_targets}/{engine.crate_count}"
    stats_raw = (
        f"{_DIM}Moves: {_RS}{_YB}{engine.moves}{_RS}"
        f"    {_DIM}Time: {_RS}{_YB}{engine.elapsed_time_string}{_RS}"
        f"    {_DIM}Crates: {_RS}{_YB}{crates}{_RS}"
    )

    # Centre the visible text to match what Rich would produce.
    visible_len = len(
        f"Moves: {engine.moves}    Time: {engine.elapsed_time_string}    Crates: {crates}"
    )
    pad = max(0, (console.width - visible_len) // 2)

    sys.stdout.write(f"\033[u\033[K{' ' * pad}{stats_raw}")
    sys.stdout.flush()


def _record_win(engine: PuzzleEngine, manager: HighScoreManager) -> str:
    console.bell()
    is_best = manager.add_score(
        engine.name,
        HighScoreEntry(
            moves=engine.moves,
            time=round(engine.elapsed_time, 2),
            date=datetime.now().strftime("%Y-%m-%d %H:%M"),
        ),
    )
    if is_best:
        return "[bold green]New best result![/bold green]"
    best = manager.best(engine.name)
    return f"[dim]Score saved. Best: {best.moves} moves in {best.time:.1f}s[/dim]"


# -- game loop ----------------------------------------------------------------


def _play_level(level: Level, manager: HighScoreManager) -> None:
    engine = PuzzleEngine.from_level(level)
    status = ""
    show_help = False
    last_tick = time.monotonic()

    while True:
        _draw_game(engine, status, show_help)
        status = ""

        # Wait for input with a short timeout so the clock keeps ticking.
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
            engine.move(DIRECTIONS[key])
        elif key == "undo":
            if not engine.undo():
                status = "[dim]Nothing to undo.[/dim]"
        elif key == "redo":
            if not engine.redo():
                status = "[dim]Nothing to redo.[/dim]"
        elif key == "restart":
            engine.reset()
            status = "[yellow]Restarted.[/yellow]"
        elif key == "help":
            show_help = not show_help
        elif key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return

        if engine.consume_win_event():
            status = _record_win(engine, manager)


# -- public entry point -------------------------------------------------------


def run(level: Level, data_dir: Path) -> None:
    """Launch the Rich CLI on *level*."""
    manager = HighScoreManager(data_dir / "highscores.json")
    _play_level(level, manager)
