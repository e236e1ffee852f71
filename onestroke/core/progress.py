from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_FILE = Path.home() / ".onestroke" / "progress.json"


@dataclass
class LevelProgress:
    completed: int = 0
    best_moves: int = 0
    best_seconds: float = 0.0


class ProgressStore:
    """Completed levels and personal bests, persisted as JSON across runs.

    Progress is best-effort: unreadable or unwritable files are logged and
    otherwise ignored.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else DEFAULT_PROGRESS_FILE
        self._progress, self._highest_level = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def highest_level(self) -> int:
        """Highest level number completed so far, 0 when none."""
        return self._highest_level

    def get_level_progress(self, level_key: str) -> LevelProgress:
        return self._progress.get(level_key, LevelProgress())

    def record_completion(self, level_key: str, level_number: int, moves: int, seconds: float) -> None:
        current = self._progress.get(level_key, LevelProgress())
        if current.completed == 0:
            current.best_moves = moves
            current.best_seconds = seconds
        else:
            current.best_moves = min(current.best_moves, moves)
            current.best_seconds = min(current.best_seconds, seconds)
        current.completed += 1
        self._progress[level_key] = current
        self._highest_level = max(self._highest_level, level_number)
        self._save()

    def reset_level(self, level_key: str) -> None:
        """Clear progress for a single level."""
        self._progress[level_key] = LevelProgress()
        self._save()

    def reset(self) -> None:
        self._progress = {}
        self._highest_level = 0
        self._save()

    def save(self) -> None:
        self._save()

    def _load(self) -> Tuple[Dict[str, LevelProgress], int]:
        progress: Dict[str, LevelProgress] = {}
        if not self._file_path.exists():
            return progress, 0
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return progress, 0
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self._file_path)
            return progress, 0

        levels = payload.get("levels", {})
        if isinstance(levels, dict):
            for key, value in levels.items():
                if not isinstance(value, dict):
                    continue
                try:
                    progress[key] = LevelProgress(
                        completed=int(value.get("completed", 0)),
                        best_moves=int(value.get("best_moves", 0)),
                        best_seconds=float(value.get("best_seconds", 0.0)),
                    )
                except (TypeError, ValueError) as e:
                    logger.warning("Skipping progress for %s in %s: %s", key, self._file_path, e)
        highest = payload.get("highest_level", 0)
        return progress, int(highest) if isinstance(highest, int) else 0

    def _save(self) -> None:
        payload = {
            "levels": {key: asdict(value) for key, value in self._progress.items()},
            "highest_level": self._highest_level,
        }
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
