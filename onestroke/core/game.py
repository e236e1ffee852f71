from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from onestroke.config import load_config
from onestroke.core.engine import StrokeEngine, TouchKind, TouchResult
from onestroke.core.patterns import Cell, Pattern
from onestroke.core.progress import ProgressStore
from onestroke.core.store import PatternStore

logger = logging.getLogger(__name__)


@dataclass
class LevelSummary:
    """Counters for the current attempt at a level."""

    level: int
    moves: int
    reverts: int
    rejected: int
    elapsed_seconds: float
    completed: bool


def level_key(level_number: int) -> str:
    return f"level{level_number}"


class PuzzleGame:
    """Level-to-level flow around a :class:`StrokeEngine`.

    Completion is reported by :meth:`touch` as soon as it happens; moving on is
    a separate :meth:`advance_level` call the caller schedules, so any pause
    between the two is up to the presentation layer.
    """

    def __init__(
        self,
        store: PatternStore,
        progress: Optional[ProgressStore] = None,
        start_level: int = 1,
    ) -> None:
        self._store = store
        self._progress = progress
        self._level = start_level
        self._engine = StrokeEngine(store.generate(start_level))
        self._restart_attempt()

    @property
    def level(self) -> int:
        return self._level

    @property
    def engine(self) -> StrokeEngine:
        return self._engine

    @property
    def pattern(self) -> Pattern:
        return self._engine.pattern

    def touch(self, cell: Optional[Cell]) -> TouchResult:
        was_completed = self._engine.is_completed()
        result = self._engine.apply_cell_touch(cell)
        if was_completed:
            return result

        if result.kind is TouchKind.REJECTED:
            self._rejected += 1
        elif result.kind is TouchKind.REVERTED:
            self._reverts += 1
        else:
            self._moves += 1

        if result.kind is TouchKind.COMPLETED:
            self._finished_at = time.time()
            summary = self.summary()
            logger.info(
                "Level %d complete: %d moves, %d reverts, %.1fs",
                self._level, summary.moves, summary.reverts, summary.elapsed_seconds,
            )
            if self._progress is not None:
                self._progress.record_completion(
                    level_key(self._level), self._level, summary.moves, summary.elapsed_seconds
                )
        return result

    def reset_level(self) -> None:
        """Start the current level over with the same pattern."""
        self._engine.reset()
        self._restart_attempt()

    def advance_level(self) -> int:
        """Move on to the next level, discarding the current session."""
        self._level += 1
        self._engine.begin_level(self._store.generate(self._level))
        self._restart_attempt()
        logger.info("Advanced to level %d (%s)", self._level, self.pattern.title)
        return self._level

    def summary(self) -> LevelSummary:
        end = self._finished_at if self._finished_at is not None else time.time()
        return LevelSummary(
            level=self._level,
            moves=self._moves,
            reverts=self._reverts,
            rejected=self._rejected,
            elapsed_seconds=max(0.0, end - self._started_at),
            completed=self._engine.is_completed(),
        )

    def _restart_attempt(self) -> None:
        self._moves = 0
        self._reverts = 0
        self._rejected = 0
        self._started_at = time.time()
        self._finished_at: Optional[float] = None


def create_game(config: Optional[Dict[str, Any]] = None, start_level: Optional[int] = None) -> PuzzleGame:
    """Build a game from configuration, resuming after the highest completed level."""
    if config is None:
        config = load_config()
    store = PatternStore(config=config)
    progress_file = config.get("progress_file")
    progress = ProgressStore(Path(progress_file).expanduser() if progress_file else None)
    if start_level is None:
        start_level = progress.highest_level + 1
    return PuzzleGame(store, progress=progress, start_level=start_level)
