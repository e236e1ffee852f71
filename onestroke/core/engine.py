from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from onestroke.core.patterns import Cell, Pattern

logger = logging.getLogger(__name__)


class TouchKind(Enum):
    REJECTED = "rejected"
    EXTENDED = "extended"
    REVERTED = "reverted"
    COMPLETED = "completed"


@dataclass(frozen=True)
class LevelSession:
    """Play state of one level: the stroke so far and whether it is finished.

    Paint orders are derived from the stroke: ``stroke[i]`` has order ``i + 1``
    and every other cell has order 0.
    """

    pattern: Pattern
    stroke: Tuple[Cell, ...] = ()
    completed: bool = False
    _index: Dict[Cell, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = {cell: i + 1 for i, cell in enumerate(self.stroke)}
        if len(index) != len(self.stroke):
            raise ValueError("stroke visits a cell twice")
        if self.stroke and self.stroke[0] != self.pattern.start:
            raise ValueError(f"stroke begins at {self.stroke[0]}, not the start cell")
        for prev, cell in zip(self.stroke, self.stroke[1:]):
            if not prev.adjacent_to(cell):
                raise ValueError(f"stroke jumps from {prev} to {cell}")
        object.__setattr__(self, "_index", index)

    def order_of(self, cell: Cell) -> int:
        return self._index.get(cell, 0)

    def orders(self) -> Dict[Cell, int]:
        return dict(self._index)

    def covers_all(self) -> bool:
        return all(self._index.get(cell, 0) > 0 for cell in self.pattern.targets)


@dataclass(frozen=True)
class TouchResult:
    """What one touch did, with a snapshot of the state it left behind."""

    kind: TouchKind
    cell: Optional[Cell]
    stroke: Tuple[Cell, ...]
    orders: Dict[Cell, int]
    completed: bool

    @property
    def painted(self) -> bool:
        """True when the touch added a cell to the stroke."""
        return self.kind in (TouchKind.EXTENDED, TouchKind.COMPLETED)


def apply_touch(session: LevelSession, cell: Optional[Cell]) -> Tuple[LevelSession, TouchKind]:
    """Return the session after touching ``cell`` and how the touch was classified.

    ``cell`` is ``None`` when the input layer found no cell under the pointer.
    Invalid touches return the session unchanged.
    """
    if session.completed or cell is None:
        return session, TouchKind.REJECTED
    pattern = session.pattern
    if not pattern.in_bounds(cell) or not pattern.is_target(cell):
        return session, TouchKind.REJECTED

    order = session.order_of(cell)
    if order > 0:
        return LevelSession(pattern, session.stroke[:order]), TouchKind.REVERTED

    if session.stroke:
        valid = session.stroke[-1].adjacent_to(cell)
    else:
        valid = cell == pattern.start
    if not valid:
        return session, TouchKind.REJECTED

    extended = LevelSession(pattern, session.stroke + (cell,))
    if extended.covers_all():
        return LevelSession(pattern, extended.stroke, completed=True), TouchKind.COMPLETED
    return extended, TouchKind.EXTENDED


class StrokeEngine:
    """Owns the session of the level being played and applies touches to it."""

    def __init__(self, pattern: Pattern) -> None:
        self._session = LevelSession(pattern)

    @property
    def pattern(self) -> Pattern:
        return self._session.pattern

    @property
    def session(self) -> LevelSession:
        return self._session

    @property
    def stroke(self) -> Tuple[Cell, ...]:
        return self._session.stroke

    @property
    def orders(self) -> Dict[Cell, int]:
        return self._session.orders()

    def begin_level(self, pattern: Pattern) -> None:
        """Replace the session with a fresh one for ``pattern``."""
        self._session = LevelSession(pattern)
        logger.debug("Began level %r with %d targets", pattern.title, len(pattern.targets))

    def reset(self) -> None:
        """Clear the stroke, keeping the current pattern."""
        self._session = LevelSession(self._session.pattern)

    def is_completed(self) -> bool:
        return self._session.completed

    def apply_cell_touch(self, cell: Optional[Cell]) -> TouchResult:
        self._session, kind = apply_touch(self._session, cell)
        if kind is TouchKind.REJECTED:
            logger.debug("Rejected touch at %s", cell)
        else:
            logger.debug("%s at %s, stroke length %d", kind.value, cell, len(self._session.stroke))
        return TouchResult(
            kind=kind,
            cell=cell,
            stroke=self._session.stroke,
            orders=self._session.orders(),
            completed=self._session.completed,
        )
