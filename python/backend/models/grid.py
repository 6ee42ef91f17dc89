"""Grid model for the Sokoban puzzle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, NamedTuple

from backend.models.cell import Cell, Direction

FrozenCells = tuple[tuple[Cell, ...], ...]


class Position(NamedTuple):
    x: int
    y: int

    def moved(self, direction: Direction, steps: int = 1) -> Position:
        dx, dy = direction.offset
        return Position(self.x + dx * steps, self.y + dy * steps)


@dataclass
class Grid:
    """A rectangular ``width × height`` array of cells.

    Dimensions are fixed at creation.  Cells are stored row-major, so
    ``cells[y][x]`` is the tile at ``Position(x, y)``.
    """

    width: int
    height: int
    cells: list[list[Cell]] = field(repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Grid dimensions must be non-negative.")
        if len(self.cells) != self.height:
            raise ValueError(
                f"Expected {self.height} rows, got {len(self.cells)}."
            )
        for y, row in enumerate(self.cells):
            if len(row) != self.width:
                raise ValueError(
                    f"Row {y} has {len(row)} cells, expected {self.width}."
                )

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Cell]]) -> Grid:
        """Build a grid from an iterable of rows.

        Example::

            Grid.from_rows([[Cell.WALL, Cell.FLOOR], [Cell.TARGET, Cell.CRATE]])
        """
        cells = [list(row) for row in rows]
        width = len(cells[0]) if cells else 0
        return cls(width=width, height=len(cells), cells=cells)

    @classmethod
    def empty(cls) -> Grid:
        return cls(width=0, height=0, cells=[])

    @classmethod
    def thaw(cls, frozen: FrozenCells) -> Grid:
        return cls.from_rows(frozen)

    # -- queries --------------------------------------------------------------

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def get(self, pos: Position) -> Cell:
        if not self.in_bounds(pos):
            raise IndexError(f"{pos} is outside a {self.width}×{self.height} grid.")
        return self.cells[pos.y][pos.x]

    __getitem__ = get

    def rows(self) -> Iterator[tuple[Cell, ...]]:
        for row in self.cells:
            yield tuple(row)

    def positions(self) -> Iterator[Position]:
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    def count(self, *kinds: Cell) -> int:
        return sum(1 for row in self.cells for cell in row if cell in kinds)

    def is_solved(self) -> bool:
        """True when no crate is left off a target."""
        return all(cell is not Cell.CRATE for row in self.cells for cell in row)

    # -- mutation -------------------------------------------------------------

    def set(self, pos: Position, cell: Cell) -> None:
        if not self.in_bounds(pos):
            raise IndexError(f"{pos} is outside a {self.width}×{self.height} grid.")
        self.cells[pos.y][pos.x] = cell

    # -- copies ---------------------------------------------------------------

    def freeze(self) -> FrozenCells:
        return tuple(tuple(row) for row in self.cells)

    def copy(self) -> Grid:
        return Grid(
            width=self.width,
            height=self.height,
            cells=[row[:] for row in self.cells],
        )
