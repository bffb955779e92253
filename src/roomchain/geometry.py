from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterator, Optional, Tuple

Cell = Tuple[int, int]


class Direction(IntEnum):
    """Compass heading of a corridor, numbered clockwise from north."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def opposite(self) -> "Direction":
        return Direction((self + 2) % 4)

    def rotate_clockwise(self) -> "Direction":
        return Direction((self + 1) % 4)

    @property
    def delta(self) -> Cell:
        """Unit step (dx, dy) with y growing north."""
        return _DELTAS[self]


_DELTAS = {
    Direction.NORTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, -1),
    Direction.WEST: (-1, 0),
}


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle of tiles anchored at its lower-left corner."""

    x: int
    y: int
    w: int
    h: int

    def right(self) -> int:
        return self.x + self.w

    def top(self) -> int:
        return self.y + self.h

    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def overlaps(self, other: "Rect") -> bool:
        """Strict intersection test; rectangles that only touch do not overlap."""
        if self.is_empty() or other.is_empty():
            return False
        return (
            self.x < other.right()
            and other.x < self.right()
            and self.y < other.top()
            and other.y < self.top()
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right() and self.y <= y < self.top()

    def cells(self) -> Iterator[Cell]:
        for yy in range(self.y, self.top()):
            for xx in range(self.x, self.right()):
                yield xx, yy


@dataclass(frozen=True)
class Room:
    """A placed room.

    ``(x, y)`` is the lower-left tile. ``entering_direction`` is the heading
    of the corridor leading into the room and is None for the first room.
    ``template`` is the opaque handle of the template it was built from.
    """

    x: int
    y: int
    width: int
    height: int
    entering_direction: Optional[Direction] = None
    template: Any = None

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def top(self) -> int:
        return self.y + self.height

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def overlaps(self, other: "Room") -> bool:
        return self.rect.overlaps(other.rect)

    def cells(self) -> Iterator[Cell]:
        return self.rect.cells()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "entering_direction": self.entering_direction.name if self.entering_direction is not None else None,
            "template": getattr(self.template, "name", self.template),
        }


@dataclass(frozen=True)
class Corridor:
    """A straight corridor leaving a room.

    Only the start point, heading and length are stored; the end point is
    derived from them.
    """

    start_x: int
    start_y: int
    length: int
    direction: Direction

    @property
    def end_x(self) -> int:
        dx, _ = self.direction.delta
        return self.start_x + dx * self.length

    @property
    def end_y(self) -> int:
        _, dy = self.direction.delta
        return self.start_y + dy * self.length

    def cells(self) -> Iterator[Cell]:
        """The ``length`` tiles walked from the start, one step per tile."""
        dx, dy = self.direction.delta
        for step in range(self.length):
            yield self.start_x + dx * step, self.start_y + dy * step

    def footprint(self) -> Rect:
        """Three-tile-wide strip used for corridor-to-corridor overlap tests.

        The strip skips the first tile so it does not collide with the wall
        of the room the corridor leaves.
        """
        span = self.length - 1
        if self.direction is Direction.NORTH:
            return Rect(self.start_x, self.start_y + 1, 3, span)
        if self.direction is Direction.EAST:
            return Rect(self.start_x + 1, self.start_y, span, 3)
        if self.direction is Direction.SOUTH:
            return Rect(self.start_x, self.start_y - 1, 3, span)
        return Rect(self.start_x - 1, self.start_y, span, 3)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_x": self.start_x,
            "start_y": self.start_y,
            "end_x": self.end_x,
            "end_y": self.end_y,
            "length": self.length,
            "direction": self.direction.name,
        }
