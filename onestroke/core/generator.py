"""Seeded procedural patterns for levels past the authored set."""

from __future__ import annotations

import logging
import random
from typing import List, Set, Tuple

from onestroke.core.patterns import Cell, Pattern

logger = logging.getLogger(__name__)

# Share of steps that follow the fewest-onward-moves rule; the rest wander.
WARNSDORFF_BIAS = 0.75


def _open_neighbors(cell: Cell, size: int, visited: Set[Cell]) -> List[Cell]:
    return [
        n for n in cell.neighbors()
        if 0 <= n.x < size and 0 <= n.y < size and n not in visited
    ]


def _walk(rng: random.Random, size: int, length: int) -> List[Cell]:
    """Self-avoiding walk of at most ``length`` cells from a random start."""
    start = Cell(rng.randrange(size), rng.randrange(size))
    path = [start]
    visited = {start}
    while len(path) < length:
        options = _open_neighbors(path[-1], size, visited)
        if not options:
            break
        onward = {c: len(_open_neighbors(c, size, visited)) for c in options}
        live = [c for c in options if onward[c] > 0] or options
        if rng.random() < WARNSDORFF_BIAS:
            fewest = min(onward[c] for c in live)
            live = [c for c in live if onward[c] == fewest]
        nxt = rng.choice(live)
        path.append(nxt)
        visited.add(nxt)
    return path


def generate_pattern(
    level_number: int,
    size: int = 8,
    seed: object = 0,
    min_fill: float = 0.35,
    max_fill: float = 0.6,
    attempts: int = 200,
) -> Tuple[Pattern, List[Cell]]:
    """Build a level whose targets are exactly the cells of one random walk.

    The walk starts on the start cell and visits every target once, so it is
    returned alongside the pattern as its solution. The result depends only on
    the arguments.
    """
    if size < 2:
        raise ValueError(f"grid size must be at least 2, got {size}")
    if not 0.0 < min_fill <= max_fill <= 1.0:
        raise ValueError(f"fill range must satisfy 0 < min <= max <= 1, got {min_fill}..{max_fill}")

    rng = random.Random(f"{seed}:{level_number}:{size}")
    cells = size * size
    length = min(cells, max(2, round(cells * rng.uniform(min_fill, max_fill))))

    best: List[Cell] = []
    for _ in range(max(1, attempts)):
        path = _walk(rng, size, length)
        if len(path) > len(best):
            best = path
        if len(best) >= length:
            break
    if len(best) < length:
        logger.warning("Level %d: walk reached %d of %d cells", level_number, len(best), length)

    pattern = Pattern(
        size=size,
        targets=frozenset(best),
        start=best[0],
        title=f"Level {level_number}",
    )
    return pattern, best
