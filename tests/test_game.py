"""Tests for onestroke.core.game – level flow, counters and recorded progress."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from onestroke.core.engine import TouchKind
from onestroke.core.game import LevelSummary, PuzzleGame, create_game, level_key
from onestroke.core.patterns import Cell
from onestroke.core.progress import ProgressStore
from onestroke.core.store import PatternStore

L_SOLUTION = [Cell(1, 1), Cell(1, 2), Cell(1, 3), Cell(2, 3)]


@pytest.fixture()
def store(tmp_path: Path) -> PatternStore:
    d = tmp_path / "levels"
    d.mkdir()
    levels = {
        "level1.yaml": {"title": "L", "rows": ["....", ".S..", ".#..", ".##."]},
        "level2.yaml": {"title": "Bar", "rows": ["S##", "...", "..."]},
    }
    for name, data in levels.items():
        (d / name).write_text(yaml.dump(data), encoding="utf-8")
    return PatternStore(d)


@pytest.fixture()
def progress(tmp_path: Path) -> ProgressStore:
    return ProgressStore(tmp_path / "progress.json")


class TestLevelKey:
    def test_format(self):
        assert level_key(3) == "level3"


class TestPuzzleGame:
    def test_starts_at_level_one(self, store: PatternStore):
        game = PuzzleGame(store)
        assert game.level == 1
        assert game.pattern.title == "L"
        assert game.engine.stroke == ()

    def test_start_level(self, store: PatternStore):
        assert PuzzleGame(store, start_level=2).pattern.title == "Bar"

    def test_counters(self, store: PatternStore):
        game = PuzzleGame(store)
        game.touch(Cell(1, 2))  # rejected: not the start
        game.touch(Cell(1, 1))
        game.touch(Cell(1, 2))
        game.touch(Cell(1, 1))  # revert
        game.touch(None)
        summary = game.summary()
        assert isinstance(summary, LevelSummary)
        assert summary.level == 1
        assert summary.moves == 2
        assert summary.reverts == 1
        assert summary.rejected == 2
        assert summary.completed is False
        assert summary.elapsed_seconds >= 0.0

    def test_completion_records_progress(self, store: PatternStore, progress: ProgressStore):
        game = PuzzleGame(store, progress=progress)
        results = [game.touch(c) for c in L_SOLUTION]
        assert results[-1].kind is TouchKind.COMPLETED
        assert game.summary().completed
        lp = progress.get_level_progress("level1")
        assert lp.completed == 1
        assert lp.best_moves == 4
        assert progress.highest_level == 1

    def test_touches_after_completion_not_counted(self, store: PatternStore, progress: ProgressStore):
        game = PuzzleGame(store, progress=progress)
        for c in L_SOLUTION:
            game.touch(c)
        result = game.touch(Cell(1, 1))
        assert result.kind is TouchKind.REJECTED
        assert game.summary().rejected == 0
        assert progress.get_level_progress("level1").completed == 1

    def test_reset_level(self, store: PatternStore):
        game = PuzzleGame(store)
        for c in L_SOLUTION:
            game.touch(c)
        game.reset_level()
        assert game.level == 1
        assert game.engine.stroke == ()
        assert game.summary().moves == 0
        assert not game.engine.is_completed()

    def test_advance_level(self, store: PatternStore):
        game = PuzzleGame(store)
        for c in L_SOLUTION:
            game.touch(c)
        assert game.advance_level() == 2
        assert game.pattern.title == "Bar"
        assert game.engine.stroke == ()
        assert not game.engine.is_completed()
        assert game.touch(Cell(0, 0)).kind is TouchKind.EXTENDED

    def test_advance_past_authored_levels(self, store: PatternStore):
        game = PuzzleGame(store, start_level=2)
        game.advance_level()
        assert game.level == 3
        assert game.pattern.title == "Level 3"
        start = game.pattern.start
        assert game.touch(start).kind is TouchKind.EXTENDED

    def test_no_carry_over_between_levels(self, store: PatternStore, progress: ProgressStore):
        game = PuzzleGame(store, progress=progress)
        game.touch(Cell(1, 1))
        game.touch(Cell(1, 2))
        game.advance_level()
        for c in (Cell(0, 0), Cell(1, 0), Cell(2, 0)):
            game.touch(c)
        assert game.summary().moves == 3
        assert progress.get_level_progress("level2").best_moves == 3
        assert progress.get_level_progress("level1").completed == 0


class TestCreateGame:
    def test_from_config(self, store: PatternStore, tmp_path: Path):
        config = {"levels_dir": str(store.levels_dir), "progress_file": str(tmp_path / "p.json")}
        game = create_game(config)
        assert game.level == 1
        assert game.pattern.title == "L"

    def test_resumes_after_highest_completed(self, store: PatternStore, tmp_path: Path):
        progress_file = tmp_path / "p.json"
        ProgressStore(progress_file).record_completion("level1", 1, moves=4, seconds=1.0)
        config = {"levels_dir": str(store.levels_dir), "progress_file": str(progress_file)}
        assert create_game(config).pattern.title == "Bar"
        assert create_game(config, start_level=1).level == 1
