from backend.models.cell import Cell, Direction
from backend.models.grid import Grid, Position
from backend.models.highscore import HighScoreEntry, HighScoreManager

__all__ = [
    "Cell",
    "Direction",
    "Grid",
    "HighScoreEntry",
    "HighScoreManager",
    "Position",
]
