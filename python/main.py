#!/usr/bin/env python3
"""Sokoban.

Usage::

    python main.py                                # pick a bundled level
    python main.py levels/level1.lvl              # interactive menu
    python main.py levels/level1.lvl -f rich      # Rich terminal
    python main.py levels/level1.lvl -f pygame    # Pygame GUI
    python main.py levels/level1.lvl --scores     # best results for the level
    python main.py levels/level1.lvl --print      # echo the parsed level
    python main.py --scores                       # best results for every level
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent  # sokoban/
DATA_DIR = PROJECT_ROOT / "data"
ASSETS_DIR = PROJECT_ROOT / "assets"
LEVELS_DIR = PROJECT_ROOT / "levels"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.levelloader import (  # noqa: E402
    Level,
    LoadError,
    discover_levels,
    dump_level,
    load_level,
)

logger = logging.getLogger(__name__)


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    vanilla = "vanilla"
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


_RUNNERS = {
    Frontend.vanilla: "frontend.cli.vanilla.app",
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool, log_file: Optional[Path]) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def _print_highscores(level_name: str) -> None:
    from backend.models.highscore import HighScoreManager

    manager = HighScoreManager(DATA_DIR / "highscores.json")
    entries = manager.get_scores(level_name)

    print(f"\n  === BEST RESULTS: {level_name} ===")
    if not entries:
        print("  No results yet.\n")
        return
    for i, e in enumerate(entries[:10], 1):
        print(f"  {i:>2}. {e.moves:>4} moves  {e.time:>7.1f}s  ({e.date})")
    print()


def _print_all_highscores() -> None:
    from backend.models.highscore import HighScoreManager

    levels = HighScoreManager(DATA_DIR / "highscores.json").get_all_levels()
    if not levels:
        print("\n  No results yet.\n")
        return
    for name in levels:
        _print_highscores(name)


def _choose_level() -> Level | None:
    """List the bundled levels and load the one picked; None on quit."""
    paths = discover_levels(LEVELS_DIR)
    if not paths:
        raise LoadError(f"No level files found in {LEVELS_DIR}")

    print()
    print("  Levels:")
    for i, path in enumerate(paths, 1):
        print(f"  {i:>2}.  {path.stem}")
    print("   0.  Quit")
    print()

    while True:
        choice = input("  Select level: ").strip()
        if choice == "0":
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(paths):
            return load_level(paths[int(choice) - 1])
        print("  Unknown option.")


def _launch(frontend: Frontend, level: Level) -> None:
    logger.info("Launching %s frontend for level %r", frontend.value, level.name)
    mod = importlib.import_module(_RUNNERS[frontend])
    if frontend is Frontend.pygame:
        mod.run(level=level, data_dir=DATA_DIR, assets_dir=ASSETS_DIR)
    else:
        mod.run(level=level, data_dir=DATA_DIR)


def _menu_loop(level: Level) -> None:
    choices = {
        "1": Frontend.vanilla,
        "2": Frontend.rich,
        "3": Frontend.pygame,
        "4": Frontend.pyqt,
    }
    while True:
        print()
        print("  ====================================")
        print("            S O K O B A N             ")
        print("  ====================================")
        print(f"  Level: {level.name} ({level.grid.width}x{level.grid.height})")
        print()
        print("  1.  Play  (Vanilla Terminal)")
        print("  2.  Play  (Rich Terminal)")
        print("  3.  Play  (Pygame GUI)")
        print("  4.  Play  (PyQt GUI)")
        print("  5.  View Best Results")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        if choice in choices:
            _launch(choices[choice], level)
        elif choice == "5":
            _print_highscores(level.name)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    level_file: Optional[Path] = typer.Argument(
        None,
        help="Path to a level file. Omit to pick one of the bundled levels.",
    ),
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show best results for the level (or every level) and exit.",
    ),
    print_level: bool = typer.Option(
        False, "--print",
        help="Print the parsed level in level-file format and exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Enable debug logging.",
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file",
        help="Also write log records to this file.",
    ),
) -> None:
    """Sokoban."""
    _configure_logging(verbose, log_file)

    if level_file is None:
        if print_level:
            typer.echo("Error: --print needs a LEVEL file.", err=True)
            raise typer.Exit(code=1)
        if scores:
            _print_all_highscores()
            return

    try:
        level = load_level(level_file) if level_file is not None else _choose_level()
    except LoadError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if level is None:
        return

    if print_level:
        typer.echo(dump_level(level.grid, level.start), nl=False)
        return

    if scores:
        _print_highscores(level.name)
        return

    if frontend is None:
        _menu_loop(level)
        return

    _launch(frontend, level)


if __name__ == "__main__":
    app()
