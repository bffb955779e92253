from __future__ import annotations

import logging
from typing import Sequence, Union

from .geometry import Corridor, Room
from .grid import TileGrid, TileType
from .validation import Retry, RetryReason

logger = logging.getLogger(__name__)


def rasterize(
    rooms: Sequence[Room], corridors: Sequence[Corridor], columns: int, rows: int
) -> Union[TileGrid, Retry]:
    """Paint rooms, then corridors, onto a fresh board.

    Corridor tiles overwrite the room tiles they start in. The first write
    that would land off the board abandons the whole grid and returns a
    Retry; no partially painted grid is ever returned.
    """
    grid = TileGrid(columns, rows)

    for i, room in enumerate(rooms):
        for x, y in room.cells():
            if not grid.in_bounds(x, y):
                logger.debug("Room %d leaves the board at (%d,%d)", i, x, y)
                return Retry(RetryReason.OUT_OF_BOUNDS, f"room {i} at {(x, y)}")
            grid.set_tile(x, y, TileType.ROOM)

    for i, corridor in enumerate(corridors):
        for x, y in corridor.cells():
            if not grid.in_bounds(x, y):
                logger.debug("Corridor %d leaves the board at (%d,%d)", i, x, y)
                return Retry(RetryReason.OUT_OF_BOUNDS, f"corridor {i} at {(x, y)}")
            grid.set_tile(x, y, TileType.CORRIDOR)

    return grid
