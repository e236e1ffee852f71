from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from onestroke.core.generator import generate_pattern
from onestroke.core.patterns import (
    DEFAULT_SEARCH_LIMIT,
    Pattern,
    PatternError,
    parse_rows,
    validate_pattern,
)

logger = logging.getLogger(__name__)


def default_levels_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "levels"


class PatternStore:
    """Level patterns by 1-based number.

    Authored levels come from ``level<N>.yaml`` files and are checked for a
    single-stroke solution when loaded; numbers past them are generated.
    """

    def __init__(self, levels_dir: Optional[Path] = None, config: Optional[Dict[str, Any]] = None) -> None:
        self._config = config or {}
        if levels_dir is None:
            configured = self._config.get("levels_dir")
            levels_dir = Path(configured).expanduser() if configured else default_levels_dir()
        self._levels_dir = levels_dir
        validation = self._config.get("validation") or {}
        self._search_limit = int(validation.get("search_limit", DEFAULT_SEARCH_LIMIT))
        self._patterns = self._load_patterns()

    @property
    def levels_dir(self) -> Path:
        return self._levels_dir

    @property
    def authored_count(self) -> int:
        return len(self._patterns)

    def all(self) -> List[Pattern]:
        return list(self._patterns)

    def generate(self, level_number: int) -> Pattern:
        if level_number < 1:
            raise ValueError(f"level numbers start at 1, got {level_number}")
        if level_number <= len(self._patterns):
            return self._patterns[level_number - 1]

        gen = self._config.get("generator") or {}
        size = int(gen.get("grid_size", 8))
        if level_number >= int(gen.get("large_from_level", 11)):
            size = int(gen.get("large_grid_size", 16))
        pattern, path = generate_pattern(
            level_number,
            size=size,
            seed=gen.get("seed", 0),
            min_fill=float(gen.get("min_fill", 0.35)),
            max_fill=float(gen.get("max_fill", 0.6)),
            attempts=int(gen.get("attempts", 200)),
        )
        validate_pattern(pattern, path=path)
        logger.info(
            "Generated level %d: %d cells on %dx%d",
            level_number, len(pattern.targets), size, size,
        )
        return pattern

    def _load_patterns(self) -> List[Pattern]:
        base_dir = self._levels_dir
        if not base_dir.exists():
            raise FileNotFoundError(f"Levels directory not found: {base_dir}")

        numbered = []
        for level_path in base_dir.glob("level*.yaml"):
            m = re.match(r"^level(\d+)$", level_path.stem)
            if m:
                numbered.append((int(m.group(1)), level_path))
        numbered.sort()

        patterns: List[Pattern] = []
        for expected, (number, level_path) in enumerate(numbered, start=1):
            if number != expected:
                raise PatternError(f"{level_path.name}: expected level{expected}.yaml before it")
            raw = yaml.safe_load(level_path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise PatternError(f"{level_path.name}: expected YAML with 'title' and 'rows'")
            title = raw.get("title")
            rows = raw.get("rows")
            if not title or not isinstance(title, str):
                raise PatternError(f"{level_path.name}: missing or invalid 'title'")
            if not rows or not isinstance(rows, list):
                raise PatternError(f"{level_path.name}: 'rows' must be a list of strings")
            try:
                pattern = parse_rows([str(row).strip() for row in rows], title=title.strip())
                validate_pattern(pattern, limit=self._search_limit)
            except PatternError as e:
                raise PatternError(f"{level_path.name}: {e}") from e
            patterns.append(pattern)

        logger.info("Loaded %d authored levels from %s", len(patterns), base_dir)
        return patterns
