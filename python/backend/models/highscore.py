"""Best results per level, persisted as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class HighScoreEntry:
    moves: int
    time: float
    date: str


def _rank(entry: HighScoreEntry) -> tuple[int, float]:
    return entry.moves, entry.time


class HighScoreManager:
    """Loads, saves, and queries level results from a JSON file."""

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath
        self._scores: dict[str, list[HighScoreEntry]] = {}
        self._load()

    # -- persistence ----------------------------------------------------------

    def _load(self) -> None:
        if self.filepath.exists():
            data = json.loads(self.filepath.read_text())
            for level, entries in data.items():
                self._scores[level] = [HighScoreEntry(**e) for e in entries]
            logger.debug("Loaded scores for %d level(s) from %s", len(self._scores), self.filepath)

    def save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        data = {
            level: [asdict(e) for e in entries]
            for level, entries in self._scores.items()
        }
        self.filepath.write_text(json.dumps(data, indent=2) + "\n")

    # -- queries --------------------------------------------------------------

    def add_score(self, level: str, entry: HighScoreEntry) -> bool:
        """Record *entry* for *level*; returns True if it is the new best.

        Fewer moves rank higher, with elapsed time breaking ties.  An entry
        that only equals the current best does not replace it.
        """
        previous = self.best(level)
        entries = self._scores.setdefault(level, [])
        entries.append(entry)
        entries.sort(key=_rank)
        self.save()
        logger.info("Recorded %d moves in %.1fs for level %r", entry.moves, entry.time, level)
        return previous is None or _rank(entry) < _rank(previous)

    def best(self, level: str) -> HighScoreEntry | None:
        entries = self._scores.get(level)
        return entries[0] if entries else None

    def get_scores(self, level: str) -> list[HighScoreEntry]:
        return self._scores.get(level, [])

    def get_all_levels(self) -> list[str]:
        return sorted(self._scores)
