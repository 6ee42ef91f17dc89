from backend.engine.gameplay.game import TILE_SIZE, PuzzleEngine

__all__ = ["PuzzleEngine", "TILE_SIZE"]
