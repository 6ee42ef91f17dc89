"""Tile kinds and movement directions for the Sokoban grid."""

from __future__ import annotations

from enum import StrEnum


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def offset(self) -> tuple[int, int]:
        """Unit ``(dx, dy)`` step.  ``y`` grows downward (row 0 is the top)."""
        return _OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Cell(StrEnum):
    """A single grid tile.

    A crate sitting on a target is its own kind, so crate presence and
    target presence can never disagree.
    """

    WALL = "wall"
    FLOOR = "floor"
    TARGET = "target"
    CRATE = "crate"
    CRATE_ON_TARGET = "crate_on_target"

    # -- queries --------------------------------------------------------------

    @property
    def is_wall(self) -> bool:
        return self is Cell.WALL

    @property
    def has_crate(self) -> bool:
        return self in (Cell.CRATE, Cell.CRATE_ON_TARGET)

    @property
    def is_target(self) -> bool:
        return self in (Cell.TARGET, Cell.CRATE_ON_TARGET)

    # -- transitions ----------------------------------------------------------

    def with_crate(self) -> Cell:
        """Return the kind this cell becomes when a crate is pushed onto it."""
        if self.is_wall or self.has_crate:
            raise ValueError(f"Cannot place a crate on {self.value!r}.")
        return Cell.CRATE_ON_TARGET if self is Cell.TARGET else Cell.CRATE

    def without_crate(self) -> Cell:
        """Return the kind left behind when this cell's crate moves away."""
        if not self.has_crate:
            raise ValueError(f"{self.value!r} holds no crate.")
        return Cell.TARGET if self is Cell.CRATE_ON_TARGET else Cell.FLOOR
