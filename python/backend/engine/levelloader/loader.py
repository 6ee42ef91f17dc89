"""Reads and writes the plain-text level format.

A level file starts with a ``height width`` header followed by ``height``
lines of ``width`` glyphs::

    5 6
    ######
    #.@..#
    #.A.a#
    #..1.#
    ######

Legend: ``#`` wall, ``.`` floor, ``@`` player start (on floor), ``A`` crate,
``a`` target, ``1`` crate already on a target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from backend.models.cell import Cell
from backend.models.grid import Grid, Position

logger = logging.getLogger(__name__)

PLAYER_GLYPH = "@"

GLYPH_TO_CELL: dict[str, Cell] = {
    "#": Cell.WALL,
    ".": Cell.FLOOR,
    "a": Cell.TARGET,
    "A": Cell.CRATE,
    "1": Cell.CRATE_ON_TARGET,
}

CELL_TO_GLYPH: dict[Cell, str] = {cell: glyph for glyph, cell in GLYPH_TO_CELL.items()}

LEVEL_SUFFIX = ".lvl"


class LoadError(ValueError):
    """Raised when a level cannot be read or is malformed."""


@dataclass(frozen=True)
class Level:
    name: str
    grid: Grid
    start: Position


# -- parsing ------------------------------------------------------------------


def _parse_header(line: str, source: str) -> tuple[int, int]:
    parts = line.split()
    if len(parts) != 2:
        raise LoadError(f"{source}:1: expected 'height width', got {line.strip()!r}.")
    try:
        height, width = (int(p) for p in parts)
    except ValueError:
        raise LoadError(f"{source}:1: dimensions must be integers, got {line.strip()!r}.") from None
    if height <= 0 or width <= 0:
        raise LoadError(f"{source}:1: dimensions must be positive, got {height}×{width}.")
    return height, width


def parse_level(text: str, name: str = "<string>") -> Level:
    """Parse level *text* into a :class:`Level`.

    Raises :class:`LoadError` on any malformed input; a partially read
    grid is never returned.
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise LoadError(f"{name}: missing header line.")
    height, width = _parse_header(lines[0], name)

    body = lines[1:]
    if len(body) < height:
        raise LoadError(f"{name}: expected {height} grid rows, got {len(body)}.")

    rows: list[list[Cell]] = []
    start: Position | None = None
    for y, line in enumerate(body[:height]):
        lineno = y + 2
        line = line.rstrip("\r")
        if len(line) != width:
            raise LoadError(
                f"{name}:{lineno}: expected {width} columns, got {len(line)}."
            )
        row: list[Cell] = []
        for x, glyph in enumerate(line):
            if glyph == PLAYER_GLYPH:
                if start is not None:
                    raise LoadError(f"{name}:{lineno}: more than one player start.")
                start = Position(x, y)
                row.append(Cell.FLOOR)
            elif glyph in GLYPH_TO_CELL:
                row.append(GLYPH_TO_CELL[glyph])
            else:
                raise LoadError(f"{name}:{lineno}: unknown glyph {glyph!r} at column {x + 1}.")
        rows.append(row)

    for offset, extra in enumerate(body[height:]):
        if extra.strip():
            raise LoadError(
                f"{name}:{height + 2 + offset}: unexpected content after the grid."
            )

    if start is None:
        raise LoadError(f"{name}: no player start ({PLAYER_GLYPH!r}) found.")

    return Level(name=name, grid=Grid.from_rows(rows), start=start)


def load_level(path: Path | str) -> Level:
    """Read and parse the level file at *path*."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"Cannot read level file {path}: {exc.strerror or exc}.") from exc
    level = parse_level(text, name=path.stem)
    logger.info(
        "Loaded level %r (%d×%d) from %s",
        level.name, level.grid.width, level.grid.height, path,
    )
    return level


# -- serialisation ------------------------------------------------------------


def dump_level(grid: Grid, player: Position) -> str:
    """Return *grid* in level-file format with ``@`` over the player's cell.

    The player glyph hides whatever lies beneath it, so a player standing
    on a target reads back as standing on floor.
    """
    lines = [f"{grid.height} {grid.width}"]
    for y, row in enumerate(grid.rows()):
        glyphs = [CELL_TO_GLYPH[cell] for cell in row]
        if y == player.y and 0 <= player.x < grid.width:
            glyphs[player.x] = PLAYER_GLYPH
        lines.append("".join(glyphs))
    return "\n".join(lines) + "\n"


def discover_levels(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(directory.glob(f"*{LEVEL_SUFFIX}"))
