from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from .geometry import Cell, Corridor, Room

logger = logging.getLogger(__name__)


class RetryReason(Enum):
    ROOM_OVERLAP = "room_overlap"
    CORRIDOR_OVERLAP = "corridor_overlap"
    OUT_OF_BOUNDS = "out_of_bounds"
    CORRIDOR_NO_ROOM = "corridor_no_room"


@dataclass(frozen=True)
class Retry:
    """Outcome of a failed layout step: the attempt is discarded and rebuilt."""

    reason: RetryReason
    detail: str = ""


def find_room_overlap(rooms: Sequence[Room]) -> Optional[Tuple[int, int]]:
    """Return the indices of the first pair of overlapping rooms, if any."""
    for i in range(len(rooms)):
        for j in range(i + 1, len(rooms)):
            if rooms[i].overlaps(rooms[j]):
                return i, j
    return None


def find_corridor_overlap(corridors: Sequence[Corridor]) -> Optional[Tuple[int, int]]:
    """Return the indices of the first pair of corridors whose footprints overlap."""
    footprints = [c.footprint() for c in corridors]
    for i in range(len(footprints)):
        for j in range(i + 1, len(footprints)):
            if footprints[i].overlaps(footprints[j]):
                return i, j
    return None


def first_out_of_bounds(cells: Iterable[Cell], columns: int, rows: int) -> Optional[Cell]:
    for x, y in cells:
        if not (0 <= x < columns and 0 <= y < rows):
            return x, y
    return None


def validate_layout(
    rooms: Sequence[Room], corridors: Sequence[Corridor], columns: int, rows: int
) -> Optional[Retry]:
    """Check a built room/corridor chain.

    Returns None when the chain is valid, otherwise the Retry describing the
    first problem found.
    """
    pair = find_room_overlap(rooms)
    if pair is not None:
        return Retry(RetryReason.ROOM_OVERLAP, f"rooms {pair[0]} and {pair[1]}")

    pair = find_corridor_overlap(corridors)
    if pair is not None:
        return Retry(RetryReason.CORRIDOR_OVERLAP, f"corridors {pair[0]} and {pair[1]}")

    for i, room in enumerate(rooms):
        cell = first_out_of_bounds(room.cells(), columns, rows)
        if cell is not None:
            return Retry(RetryReason.OUT_OF_BOUNDS, f"room {i} at {cell}")
    for i, corridor in enumerate(corridors):
        cell = first_out_of_bounds(corridor.cells(), columns, rows)
        if cell is not None:
            return Retry(RetryReason.OUT_OF_BOUNDS, f"corridor {i} at {cell}")
    return None
