"""Command-line entry point and key mapping tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest
from typer.testing import CliRunner

import main
from backend.engine.levelloader import parse_level
from backend.models.highscore import HighScoreEntry, HighScoreManager
from frontend.cli.input_handler import DIRECTIONS, resolve, resolve_arrow, resolve_sequence
from frontend.cli.vanilla import app as vanilla

LEVEL = """\
3 3
#a#
#A#
#@#
"""

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo the root-logger changes made by main._configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def level_file(tmp_path: Path) -> Path:
    path = tmp_path / "tiny.lvl"
    path.write_text(LEVEL)
    return path


# -- main ---------------------------------------------------------------------


def test_print_echoes_level(level_file: Path) -> None:
    result = runner.invoke(main.app, [str(level_file), "--print"])
    assert result.exit_code == 0
    assert result.stdout == LEVEL


def test_missing_level_exits_with_error(tmp_path: Path) -> None:
    result = runner.invoke(main.app, [str(tmp_path / "nonexistent_level.lvl")])
    assert result.exit_code == 1


def test_malformed_level_exits_with_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.lvl"
    path.write_text("2 3\n#@#\n")
    result = runner.invoke(main.app, [str(path), "--print"])
    assert result.exit_code == 1


def test_scores_lists_best_results(
    level_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    data_dir = tmp_path / "data"
    monkeypatch.setattr(main, "DATA_DIR", data_dir)
    HighScoreManager(data_dir / "highscores.json").add_score(
        "tiny", HighScoreEntry(moves=1, time=0.8, date="2026-01-01 10:00")
    )

    result = runner.invoke(main.app, [str(level_file), "--scores"])
    assert result.exit_code == 0
    assert "BEST RESULTS: tiny" in result.stdout
    assert "1 moves" in result.stdout


def test_scores_without_results(
    level_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(main, "DATA_DIR", tmp_path / "data")
    result = runner.invoke(main.app, [str(level_file), "--scores"])
    assert result.exit_code == 0
    assert "No results yet." in result.stdout


def test_log_file_option_writes_records(level_file: Path, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "sokoban.log"
    result = runner.invoke(
        main.app, [str(level_file), "--print", "--verbose", "--log-file", str(log_file)]
    )
    assert result.exit_code == 0
    assert "Loaded level 'tiny'" in log_file.read_text()


# -- key mapping --------------------------------------------------------------


@pytest.mark.parametrize(
    "ch, action",
    [
        ("w", "up"),
        ("S", "down"),
        ("a", "left"),
        ("d", "right"),
        ("x", "undo"),
        ("u", "undo"),
        ("y", "redo"),
        ("r", "restart"),
        ("q", "quit"),
        ("\x03", "quit"),
        ("z", "z"),
        ("\x07", ""),
    ],
)
def test_resolve_keys(ch: str, action: str) -> None:
    assert resolve(ch) == action


def test_arrow_keys_map_to_directions() -> None:
    assert [resolve_arrow(c) for c in "ABCD"] == ["up", "down", "right", "left"]
    assert resolve_arrow("Z") == ""
    assert set(DIRECTIONS) == {"up", "down", "left", "right"}


def _reader(chars: str):
    pending = iter(chars)
    return lambda: next(pending, None)


@pytest.mark.parametrize(
    "first, rest, action",
    [
        ("\x1b", "[A", "up"),
        ("\x1b", "[D", "left"),
        ("\x1b", "", "quit"),
        ("\x1b", "[", ""),
        ("\xe0", "H", "up"),
        ("\x00", "M", "right"),
        ("\xe0", "", ""),
        ("y", "", "redo"),
    ],
    ids=["esc-up", "esc-left", "bare-esc", "cut-short", "win-up", "win-right", "win-cut", "plain"],
)
def test_resolve_sequence(first: str, rest: str, action: str) -> None:
    assert resolve_sequence(first, _reader(rest)) == action


# -- level selection ----------------------------------------------------------


@pytest.fixture
def levels_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "levels"
    directory.mkdir()
    (directory / "b.lvl").write_text(LEVEL)
    (directory / "a.lvl").write_text(LEVEL.replace("#a#", "#1#").replace("#A#", "#.#"))
    monkeypatch.setattr(main, "LEVELS_DIR", directory)
    return directory


def test_level_picker_lists_bundled_levels(levels_dir: Path) -> None:
    result = runner.invoke(main.app, ["-f", "vanilla"], input="0\n")
    assert result.exit_code == 0
    assert "1.  a" in result.stdout
    assert "2.  b" in result.stdout


def test_level_picker_without_levels_exits_with_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(main, "LEVELS_DIR", tmp_path / "empty")
    result = runner.invoke(main.app, [], input="0\n")
    assert result.exit_code == 1


def test_picked_level_reaches_frontend(
    levels_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    launched: list[tuple[main.Frontend, str]] = []
    monkeypatch.setattr(main, "_launch", lambda frontend, level: launched.append((frontend, level.name)))
    result = runner.invoke(main.app, ["-f", "rich"], input="9\n2\n")
    assert result.exit_code == 0
    assert "Unknown option." in result.stdout
    assert launched == [(main.Frontend.rich, "b")]


def test_print_requires_level_file() -> None:
    result = runner.invoke(main.app, ["--print"])
    assert result.exit_code == 1


def test_scores_without_level_lists_every_level(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    data_dir = tmp_path / "data"
    monkeypatch.setattr(main, "DATA_DIR", data_dir)
    manager = HighScoreManager(data_dir / "highscores.json")
    manager.add_score("level1", HighScoreEntry(moves=9, time=4.0, date="2026-01-01 10:00"))
    manager.add_score("level2", HighScoreEntry(moves=21, time=8.0, date="2026-01-01 11:00"))

    result = runner.invoke(main.app, ["--scores"])
    assert result.exit_code == 0
    assert "BEST RESULTS: level1" in result.stdout
    assert "BEST RESULTS: level2" in result.stdout


# -- vanilla frontend ---------------------------------------------------------


def _play(keys: list[str], tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> HighScoreManager:
    pending = iter(keys)
    monkeypatch.setattr(vanilla, "get_key_timeout", lambda timeout: next(pending))
    manager = HighScoreManager(tmp_path / "highscores.json")
    vanilla._play_level(parse_level(LEVEL, name="tiny"), manager)
    return manager


def test_win_saves_one_score(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _play(["up", "quit"], tmp_path, monkeypatch)
    assert [e.moves for e in manager.get_scores("tiny")] == [1]


def test_undo_redo_after_win_does_not_save_again(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _play(["up", "undo", "redo", "undo", "up", "quit"], tmp_path, monkeypatch)
    assert len(manager.get_scores("tiny")) == 1


def test_restart_allows_a_new_score(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _play(["up", "restart", "up", "quit"], tmp_path, monkeypatch)
    assert len(manager.get_scores("tiny")) == 2
