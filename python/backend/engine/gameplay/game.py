"""Core gameplay logic — processes moves and pushes, tracks undo/redo history."""

from __future__ import annotations

import logging
from pathlib import Path

from backend.engine.gamestate import History, PuzzleState
from backend.engine.levelloader import Level, load_level
from backend.models.cell import Cell, Direction
from backend.models.grid import Grid, Position

logger = logging.getLogger(__name__)

TILE_SIZE = 64
DEFAULT_FACING = Direction.DOWN


class PuzzleEngine:
    """Owns a single Sokoban session.

    Every command is total: illegal moves and empty histories are reported
    through a ``False`` return value and leave the state untouched.
    """

    def __init__(self, grid: Grid | None = None, start: Position | None = None) -> None:
        grid = grid.copy() if grid is not None else Grid.empty()
        start = start if start is not None else Position(0, 0)
        if grid.width and grid.height:
            if not grid.in_bounds(start):
                raise ValueError(f"Start {start} lies outside the grid.")
            if grid[start].is_wall or grid[start].has_crate:
                raise ValueError(f"Start {start} is not on an empty tile.")

        self.name = "<untitled>"
        self._grid = grid
        self._initial = PuzzleState.capture(grid, start, 0)
        self._player = start
        self._moves = 0
        self._won = False
        self._win_pending = False
        self._announced = False
        self._facing = DEFAULT_FACING
        self._elapsed = 0.0
        self._history = History()

    @classmethod
    def from_level(cls, level: Level) -> PuzzleEngine:
        engine = cls(level.grid, level.start)
        engine.name = level.name
        return engine

    @classmethod
    def from_file(cls, path: Path | str) -> PuzzleEngine:
        """Load *path* and start a session; raises ``LoadError`` on bad input."""
        return cls.from_level(load_level(path))

    # -- dimensions -----------------------------------------------------------

    @property
    def width(self) -> int:
        return self._grid.width

    @property
    def height(self) -> int:
        return self._grid.height

    @property
    def pixel_width(self) -> int:
        return self.width * TILE_SIZE

    @property
    def pixel_height(self) -> int:
        return self.height * TILE_SIZE

    # -- queries --------------------------------------------------------------

    @property
    def grid(self) -> Grid:
        return self._grid

    def cell_at(self, pos: Position) -> Cell:
        return self._grid[pos]

    @property
    def player(self) -> Position:
        return self._player

    @property
    def facing(self) -> Direction:
        return self._facing

    @property
    def moves(self) -> int:
        return self._moves

    @property
    def is_won(self) -> bool:
        return self._won

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def crate_count(self) -> int:
        return self._grid.count(Cell.CRATE, Cell.CRATE_ON_TARGET)

    @property
    def crates_on_targets(self) -> int:
        return self._grid.count(Cell.CRATE_ON_TARGET)

    def snapshot(self) -> PuzzleState:
        return PuzzleState.capture(self._grid, self._player, self._moves)

    def consume_win_event(self) -> bool:
        """Return True once, the first time the level is solved since the last reset."""
        pending = self._win_pending
        self._win_pending = False
        return pending

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        return self._elapsed

    @property
    def elapsed_time_string(self) -> str:
        m, s = divmod(int(self._elapsed), 60)
        return f"{m:02d}:{s:02d}"

    def update_elapsed_time(self, delta: float) -> None:
        if delta > 0:
            self._elapsed += delta

    # -- commands -------------------------------------------------------------

    def move(self, direction: Direction) -> bool:
        """Step the player one cell in *direction*, pushing a crate if needed.

        The full transition is validated before anything is committed, so a
        rejected move leaves no trace in the undo history.  Returns True if
        the move was applied.
        """
        if self._won:
            return False

        target = self._player.moved(direction)
        if not self._grid.in_bounds(target) or self._grid[target].is_wall:
            logger.debug("Move %s from %s blocked", direction.value, self._player)
            return False

        # The player turns toward the cell even if the crate there won't budge.
        self._facing = direction

        target_cell = self._grid[target]
        beyond: Position | None = None
        if target_cell.has_crate:
            beyond = target.moved(direction)
            if not self._can_receive_crate(beyond):
                logger.debug("Push %s at %s blocked", direction.value, target)
                return False

        self._history.record(self.snapshot())
        if beyond is not None:
            self._grid.set(beyond, self._grid[beyond].with_crate())
            self._grid.set(target, target_cell.without_crate())
        self._player = target
        self._moves += 1
        logger.debug("Moved %s to %s (moves=%d)", direction.value, target, self._moves)

        self._check_win()
        return True

    def undo(self) -> bool:
        previous = self._history.step_back(self.snapshot())
        if previous is None:
            return False
        self._restore(previous)
        # Undo always lands in an in-progress state.  A win nobody consumed
        # yet is withdrawn and will be announced again when reached.
        self._won = False
        if self._win_pending:
            self._win_pending = False
            self._announced = False
        logger.debug("Undo to move %d", self._moves)
        return True

    def redo(self) -> bool:
        following = self._history.step_forward(self.snapshot())
        if following is None:
            return False
        self._restore(following)
        logger.debug("Redo to move %d", self._moves)
        self._check_win()
        return True

    def reset(self) -> None:
        self._restore(self._initial)
        self._elapsed = 0.0
        self._won = False
        self._win_pending = False
        self._announced = False
        self._history.clear()
        self._facing = DEFAULT_FACING
        logger.info("Level %r reset", self.name)

    # -- helpers --------------------------------------------------------------

    def _can_receive_crate(self, pos: Position) -> bool:
        if not self._grid.in_bounds(pos):
            return False
        cell = self._grid[pos]
        return not cell.is_wall and not cell.has_crate

    def _restore(self, state: PuzzleState) -> None:
        self._grid = state.restore_grid()
        self._player = state.player
        self._moves = state.moves

    def _check_win(self) -> None:
        solved = self._grid.is_solved()
        if solved and not self._won:
            if not self._announced:
                self._win_pending = True
                self._announced = True
            logger.info("Level %r solved in %d moves", self.name, self._moves)
        self._won = solved
