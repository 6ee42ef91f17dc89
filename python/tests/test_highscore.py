"""High score persistence tests."""

from __future__ import annotations

import json
from pathlib import Path

from backend.models.highscore import HighScoreEntry, HighScoreManager


def test_scores_sorted_by_moves_then_time(tmp_path: Path) -> None:
    manager = HighScoreManager(tmp_path / "highscores.json")
    manager.add_score("level1", HighScoreEntry(moves=30, time=12.0, date="2026-01-01 10:00"))
    manager.add_score("level1", HighScoreEntry(moves=20, time=50.0, date="2026-01-02 10:00"))
    manager.add_score("level1", HighScoreEntry(moves=20, time=40.0, date="2026-01-03 10:00"))

    assert [(e.moves, e.time) for e in manager.get_scores("level1")] == [
        (20, 40.0),
        (20, 50.0),
        (30, 12.0),
    ]


def test_scores_persist_between_managers(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "highscores.json"
    HighScoreManager(path).add_score(
        "level2", HighScoreEntry(moves=7, time=3.5, date="2026-01-01 10:00")
    )

    data = json.loads(path.read_text())
    assert data == {"level2": [{"moves": 7, "time": 3.5, "date": "2026-01-01 10:00"}]}

    reloaded = HighScoreManager(path)
    assert reloaded.get_all_levels() == ["level2"]
    assert reloaded.get_scores("level2")[0].moves == 7


def test_unknown_level_has_no_scores(tmp_path: Path) -> None:
    manager = HighScoreManager(tmp_path / "highscores.json")
    assert manager.get_scores("nope") == []
    assert manager.get_all_levels() == []


def test_best_tracks_fewest_moves(tmp_path: Path) -> None:
    manager = HighScoreManager(tmp_path / "highscores.json")
    assert manager.best("level1") is None

    assert manager.add_score("level1", HighScoreEntry(moves=12, time=9.0, date="2026-01-01 10:00"))
    assert not manager.add_score("level1", HighScoreEntry(moves=15, time=2.0, date="2026-01-02 10:00"))
    assert not manager.add_score("level1", HighScoreEntry(moves=12, time=9.0, date="2026-01-03 10:00"))
    assert manager.add_score("level1", HighScoreEntry(moves=12, time=4.5, date="2026-01-04 10:00"))

    best = manager.best("level1")
    assert best is not None
    assert (best.moves, best.time) == (12, 4.5)
