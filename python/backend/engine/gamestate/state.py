"""Immutable puzzle snapshots and the undo/redo history built from them."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.grid import FrozenCells, Grid, Position


@dataclass(frozen=True)
class PuzzleState:
    """Player position, grid contents, and move count at one point in time.

    The grid is stored as nested tuples, so a snapshot shares nothing
    mutable with the live grid it was taken from.
    """

    player: Position
    cells: FrozenCells
    moves: int

    @classmethod
    def capture(cls, grid: Grid, player: Position, moves: int) -> PuzzleState:
        return cls(player=player, cells=grid.freeze(), moves=moves)

    def restore_grid(self) -> Grid:
        return Grid.thaw(self.cells)


class History:
    """Undo and redo stacks, oldest entry first."""

    def __init__(self) -> None:
        self._undo: list[PuzzleState] = []
        self._redo: list[PuzzleState] = []

    # -- queries --------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    # -- stack operations -----------------------------------------------------

    def record(self, state: PuzzleState) -> None:
        """Push the pre-move *state*; a new move discards the redo branch."""
        self._undo.append(state)
        self._redo.clear()

    def step_back(self, current: PuzzleState) -> PuzzleState | None:
        if not self._undo:
            return None
        self._redo.append(current)
        return self._undo.pop()

    def step_forward(self, current: PuzzleState) -> PuzzleState | None:
        if not self._redo:
            return None
        self._undo.append(current)
        return self._redo.pop()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
