"""PyQt6 GUI frontend — grid of tile labels, live stats, keyboard play."""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont, QKeyEvent
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QLabel,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from backend.engine.gameplay import PuzzleEngine
from backend.engine.levelloader import Level
from backend.models.cell import Cell, Direction
from backend.models.grid import Position
from backend.models.highscore import HighScoreEntry, HighScoreManager

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_BLUE = "#89b4fa"
_GREEN = "#a6e3a1"
_PINK = "#f5c2e7"
_PEACH = "#fab387"
_YELLOW = "#f9e2af"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""

_TILE_PX = 48

# (text, background, foreground) per tile kind
_TILE_STYLE: dict[Cell, tuple[str, str, str]] = {
    Cell.WALL: ("", _SURFACE1, _TEXT),
    Cell.FLOOR: ("", _MANTLE, _TEXT),
    Cell.TARGET: ("○", _MANTLE, _PINK),
    Cell.CRATE: ("▣", _PEACH, _BASE),
    Cell.CRATE_ON_TARGET: ("▣", _GREEN, _BASE),
}

_PLAYER_GLYPH: dict[Direction, str] = {
    Direction.UP: "▲",
    Direction.DOWN: "▼",
    Direction.LEFT: "◀",
    Direction.RIGHT: "▶",
}

_HINT = "Arrows / WASD  move     X  undo     Y  redo     R  reset     Esc  quit"


class _GamePage(QWidget):
    """The puzzle grid with live stats."""

    def __init__(self, engine: PuzzleEngine, hs: HighScoreManager) -> None:
        super().__init__()
        self.setObjectName("page")
        self.engine = engine
        self._hs = hs
        self._last_tick = time.monotonic()

        root = QVBoxLayout(self)
        root.setSpacing(6)
        root.setContentsMargins(16, 10, 16, 10)

        # title
        t = QLabel(f"Sokoban  {engine.name}")
        t.setFont(QFont("Helvetica", 17, QFont.Weight.Bold))
        t.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(t)

        # stats
        self._stats = QLabel()
        self._stats.setFont(QFont("Helvetica", 13))
        self._stats.setStyleSheet(f"color:{_PINK};")
        self._stats.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._stats)

        # board
        frame = QFrame()
        frame.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")
        grid = QGridLayout(frame)
        grid.setSpacing(0)
        grid.setContentsMargins(8, 8, 8, 8)
        root.addWidget(frame, alignment=Qt.AlignmentFlag.AlignCenter)

        self._tiles: list[list[QLabel]] = []
        for y in range(engine.height):
            row: list[QLabel] = []
            for x in range(engine.width):
                lbl = QLabel()
                lbl.setFixedSize(_TILE_PX, _TILE_PX)
                lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
                lbl.setFont(QFont("Helvetica", _TILE_PX // 2, QFont.Weight.Bold))
                grid.addWidget(lbl, y, x)
                row.append(lbl)
            self._tiles.append(row)

        # hint
        self._hint = QLabel(_HINT)
        self._hint.setFont(QFont("Helvetica", 11))
        self._hint.setStyleSheet(f"color:{_OVERLAY0};")
        self._hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._hint)

        # timer
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._timer.start(200)

        self.sync()

    # -- rendering --

    def sync(self) -> None:
        engine = self.engine
        for pos in engine.grid.positions():
            text, bg, fg = _TILE_STYLE[engine.cell_at(pos)]
            if pos == engine.player:
                text, fg = _PLAYER_GLYPH[engine.facing], _BLUE
            lbl = self._tiles[pos.y][pos.x]
            lbl.setText(text)
            lbl.setStyleSheet(f"background:{bg}; color:{fg};")
        if engine.is_won:
            self._hint.setText(f"You Win!  {engine.moves} moves     R  reset     X  undo")
            self._hint.setStyleSheet(f"color:{_GREEN};font-weight:bold;")
        else:
            self._hint.setText(_HINT)
            self._hint.setStyleSheet(f"color:{_OVERLAY0};")
        self._refresh_stats()

    def _refresh_stats(self) -> None:
        engine = self.engine
        self._stats.setText(
            f"Moves: {engine.moves}    Time: {engine.elapsed_time_string}"
            f"    Crates: {engine.crates_on_targets}/{engine.crate_count}"
        )

    def _tick(self) -> None:
        now = time.monotonic()
        if not self.engine.is_won:
            self.engine.update_elapsed_time(now - self._last_tick)
        self._last_tick = now
        self._refresh_stats()

    # -- commands --

    def move(self, d: Direction) -> None:
        self.engine.move(d)
        self._after_command()

    def undo(self) -> None:
        self.engine.undo()
        self._after_command()

    def redo(self) -> None:
        self.engine.redo()
        self._after_command()

    def reset(self) -> None:
        self.engine.reset()
        self._after_command()

    def _after_command(self) -> None:
        if self.engine.consume_win_event():
            QApplication.beep()
            self._hs.add_score(
                self.engine.name,
                HighScoreEntry(
                    moves=self.engine.moves,
                    time=round(self.engine.elapsed_time, 2),
                    date=datetime.now().strftime("%Y-%m-%d %H:%M"),
                ),
            )
        self.sync()


class _MainWindow(QMainWindow):
    _DIRS = {
        Qt.Key.Key_Up: Direction.UP,
        Qt.Key.Key_W: Direction.UP,
        Qt.Key.Key_Down: Direction.DOWN,
        Qt.Key.Key_S: Direction.DOWN,
        Qt.Key.Key_Left: Direction.LEFT,
        Qt.Key.Key_A: Direction.LEFT,
        Qt.Key.Key_Right: Direction.RIGHT,
        Qt.Key.Key_D: Direction.RIGHT,
    }

    def __init__(self, level: Level, data_dir: Path) -> None:
        super().__init__()
        self.setWindowTitle(f"Sokoban — {level.name}")
        self.setStyleSheet(_GLOBAL_CSS)

        hs = HighScoreManager(data_dir / "highscores.json")
        self._page = _GamePage(PuzzleEngine.from_level(level), hs)
        self.setCentralWidget(self._page)

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        page = self._page

        if key in self._DIRS:
            page.move(self._DIRS[key])
        elif key in (Qt.Key.Key_X, Qt.Key.Key_U):
            page.undo()
        elif key == Qt.Key.Key_Y:
            page.redo()
        elif key == Qt.Key.Key_R:
            page.reset()
        elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
            self.close()
        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(level: Level, data_dir: Path = Path("data")) -> None:
    """Launch the PyQt6 GUI on *level*."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(level, data_dir)
    window.show()
    qapp.exec()
