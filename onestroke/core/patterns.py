from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, Iterator, List, Optional, Sequence

EMPTY = "."
TARGET = "#"
START = "S"

DEFAULT_SEARCH_LIMIT = 200_000


class PatternError(ValueError):
    """A level definition that cannot be played as authored."""


@dataclass(frozen=True)
class Cell:
    x: int
    y: int

    def adjacent_to(self, other: Cell) -> bool:
        dx = abs(self.x - other.x)
        dy = abs(self.y - other.y)
        return (dx == 1 and dy == 0) or (dx == 0 and dy == 1)

    def neighbors(self) -> Iterator[Cell]:
        yield Cell(self.x + 1, self.y)
        yield Cell(self.x, self.y + 1)
        yield Cell(self.x - 1, self.y)
        yield Cell(self.x, self.y - 1)


@dataclass(frozen=True)
class Pattern:
    """Immutable level grid: which cells must be painted and where to begin."""

    size: int
    targets: FrozenSet[Cell]
    start: Optional[Cell]
    title: str = ""

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.size and 0 <= cell.y < self.size

    def is_target(self, cell: Cell) -> bool:
        return cell in self.targets

    def to_rows(self) -> List[str]:
        rows = []
        for y in range(self.size):
            chars = []
            for x in range(self.size):
                cell = Cell(x, y)
                if cell == self.start:
                    chars.append(START)
                elif cell in self.targets:
                    chars.append(TARGET)
                else:
                    chars.append(EMPTY)
            rows.append("".join(chars))
        return rows


def parse_rows(rows: Sequence[str], title: str = "") -> Pattern:
    """Build a pattern from an ASCII grid of ``.``, ``#`` and a single ``S``."""
    if not rows:
        raise PatternError("pattern has no rows")
    size = len(rows)
    targets = set()
    start: Optional[Cell] = None
    for y, row in enumerate(rows):
        if len(row) != size:
            raise PatternError(f"row {y} has length {len(row)}, expected {size}")
        for x, char in enumerate(row):
            if char == EMPTY:
                continue
            if char not in (TARGET, START):
                raise PatternError(f"unexpected character {char!r} at ({x}, {y})")
            cell = Cell(x, y)
            targets.add(cell)
            if char == START:
                if start is not None:
                    raise PatternError(f"second start cell at ({x}, {y})")
                start = cell
    if start is None:
        raise PatternError("pattern has no start cell")
    return Pattern(size=size, targets=frozenset(targets), start=start, title=title)


def _target_neighbors(pattern: Pattern) -> Dict[Cell, List[Cell]]:
    return {
        cell: [n for n in cell.neighbors() if n in pattern.targets]
        for cell in pattern.targets
    }


def _reachable(seeds: Sequence[Cell], allowed: AbstractSet[Cell], graph: Dict[Cell, List[Cell]]) -> set:
    seen = set(seeds)
    stack = list(seeds)
    while stack:
        cell = stack.pop()
        for n in graph[cell]:
            if n in allowed and n not in seen:
                seen.add(n)
                stack.append(n)
    return seen


def find_hamiltonian_path(pattern: Pattern, limit: int = DEFAULT_SEARCH_LIMIT) -> Optional[List[Cell]]:
    """Search for a path from ``start`` that visits every target exactly once.

    Returns the path, or ``None`` when the target set admits none. Raises
    :class:`PatternError` when the search expands more than ``limit`` nodes
    without reaching a verdict.
    """
    start = pattern.start
    targets = pattern.targets
    if start is None or start not in targets:
        return None

    graph = _target_neighbors(pattern)
    if len(_reachable([start], targets, graph)) != len(targets):
        return None

    # Cells alternate colour along a path, so the start colour takes the larger half.
    start_colour = (start.x + start.y) % 2
    same = sum(1 for c in targets if (c.x + c.y) % 2 == start_colour)
    if same != (len(targets) + 1) // 2:
        return None

    path = [start]
    visited = {start}
    expanded = 0

    def free_degree(cell: Cell) -> int:
        return sum(1 for n in graph[cell] if n not in visited)

    def viable(head: Cell) -> bool:
        remaining = targets - visited
        if not remaining:
            return True
        dead_ends = 0
        for cell in remaining:
            exits = free_degree(cell) + (1 if head in graph[cell] else 0)
            if exits == 0:
                return False
            if exits == 1:
                dead_ends += 1
                if dead_ends > 1:
                    return False
        seeds = [n for n in graph[head] if n not in visited]
        return len(_reachable(seeds, remaining, graph)) == len(remaining)

    def extend(head: Cell) -> bool:
        nonlocal expanded
        if len(path) == len(targets):
            return True
        expanded += 1
        if expanded > limit:
            raise PatternError(
                f"{pattern.title or 'pattern'}: path search gave up after {limit} steps"
            )
        options = sorted((n for n in graph[head] if n not in visited), key=free_degree)
        for nxt in options:
            visited.add(nxt)
            path.append(nxt)
            if viable(nxt) and extend(nxt):
                return True
            visited.discard(nxt)
            path.pop()
        return False

    if not viable(start):
        return None
    return list(path) if extend(start) else None


def _check_witness(pattern: Pattern, path: Sequence[Cell]) -> None:
    if not path or path[0] != pattern.start:
        raise PatternError("witness path does not begin at the start cell")
    if len(path) != len(pattern.targets) or set(path) != pattern.targets:
        raise PatternError("witness path does not visit every target exactly once")
    for prev, cell in zip(path, path[1:]):
        if not prev.adjacent_to(cell):
            raise PatternError(f"witness path jumps from {prev} to {cell}")


def validate_pattern(
    pattern: Pattern,
    path: Optional[Sequence[Cell]] = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> List[Cell]:
    """Reject patterns that cannot be completed in one stroke.

    When ``path`` is given it is checked as a solution instead of searching.
    Returns a solution path.
    """
    name = pattern.title or "pattern"
    if not pattern.targets:
        raise PatternError(f"{name}: no target cells")
    outside = [c for c in pattern.targets if not pattern.in_bounds(c)]
    if outside:
        raise PatternError(f"{name}: target {outside[0]} lies outside the {pattern.size}x{pattern.size} grid")
    if pattern.start is None:
        raise PatternError(f"{name}: no start cell")
    if pattern.start not in pattern.targets:
        raise PatternError(f"{name}: start {pattern.start} is not a target cell")
    if path is not None:
        _check_witness(pattern, path)
        return list(path)
    found = find_hamiltonian_path(pattern, limit=limit)
    if found is None:
        raise PatternError(f"{name}: no single stroke from {pattern.start} covers every target")
    return found
