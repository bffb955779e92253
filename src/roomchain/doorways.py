from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .geometry import Cell, Corridor, Direction, Room

EXIT = "exit"
ENTRY = "entry"


@dataclass(frozen=True)
class Doorway:
    """Wall tile a corridor passes through.

    ``kind`` is "exit" on the room the corridor leaves and "entry" on the
    room it leads into. ``direction`` is the corridor heading.

    ``(x, y)`` is a cell on the single-tile corridor line as rasterized, not
    the centre of the three-tile footprint strip, which sits one tile further
    east (north and south headings) or north (east and west headings).
    """

    room_index: int
    corridor_index: int
    x: int
    y: int
    direction: Direction
    kind: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "room": self.room_index,
            "corridor": self.corridor_index,
            "x": self.x,
            "y": self.y,
            "direction": self.direction.name,
            "kind": self.kind,
        }


def exit_cell(corridor: Corridor) -> Cell:
    """Tile where the corridor crosses the wall of the room it leaves.

    North and east corridors start on the wall itself; south and west ones
    start one tile inside the room and cross the wall on their second tile.
    """
    if corridor.direction in (Direction.NORTH, Direction.EAST):
        return corridor.start_x, corridor.start_y
    dx, dy = corridor.direction.delta
    return corridor.start_x + dx, corridor.start_y + dy


def entry_cell(corridor: Corridor) -> Cell:
    """Tile on the entry wall of the next room; rooms are placed so this is the corridor end."""
    return corridor.end_x, corridor.end_y


def doorways(rooms: Sequence[Room], corridors: Sequence[Corridor]) -> List[Doorway]:
    """Door openings for every corridor, exit then entry, in chain order."""
    if len(corridors) != max(0, len(rooms) - 1):
        raise ValueError(f"Expected {max(0, len(rooms) - 1)} corridors for {len(rooms)} rooms, got {len(corridors)}")
    out: List[Doorway] = []
    for i, corridor in enumerate(corridors):
        x, y = exit_cell(corridor)
        out.append(Doorway(i, i, x, y, corridor.direction, EXIT))
        x, y = entry_cell(corridor)
        out.append(Doorway(i + 1, i, x, y, corridor.direction, ENTRY))
    return out
