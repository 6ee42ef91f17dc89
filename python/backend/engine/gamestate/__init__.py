from backend.engine.gamestate.state import History, PuzzleState

__all__ = ["History", "PuzzleState"]
