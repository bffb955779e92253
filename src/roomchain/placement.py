"""Placement math for rooms and the corridors chaining them.

Random draws along a wall use ``draw_range(rng, lo, hi)``: an exclusive upper
bound, the same convention IntRange uses, and ``lo`` for an empty span so
rooms three tiles wide or narrower still get a coordinate.
"""
from __future__ import annotations

import logging
from typing import Union

from .geometry import Corridor, Direction, Room
from .random_source import IntRange, RandomSource, draw_range
from .templates import RoomTemplate
from .validation import Retry, RetryReason

logger = logging.getLogger(__name__)


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def setup_first_room(template: RoomTemplate, columns: int, rows: int) -> Room:
    """Place the root room roughly in the middle of the board.

    Halves are rounded to even, so a 5-wide room on a 20-wide board starts
    at x=8.
    """
    width, height = template.width, template.height
    x = round(columns / 2 - width / 2)
    y = round(rows / 2 - height / 2)
    return Room(x=x, y=y, width=width, height=height, entering_direction=None, template=template)


def setup_room(template: RoomTemplate, columns: int, rows: int, corridor: Corridor, rng: RandomSource) -> Room:
    """Place a room so its entry wall sits on the end of ``corridor``.

    The room is shifted by a random offset along the wall, then clamped so
    it stays on the board along that axis.
    """
    width, height = template.width, template.height
    end_x, end_y = corridor.end_x, corridor.end_y
    direction = corridor.direction

    if direction is Direction.NORTH:
        # Corridor leads into the bottom wall
        y = end_y
        x = _clamp(draw_range(rng, end_x - width + 1, end_x), 0, columns - width)
    elif direction is Direction.EAST:
        x = end_x
        y = _clamp(draw_range(rng, end_y - height + 1, end_y), 0, rows - height)
    elif direction is Direction.SOUTH:
        y = end_y - height + 1
        x = _clamp(draw_range(rng, end_x - width + 1, end_x), 0, columns - width)
    else:
        x = end_x - width + 1
        y = _clamp(draw_range(rng, end_y - height + 1, end_y), 0, rows - height)

    return Room(x=x, y=y, width=width, height=height, entering_direction=direction, template=template)


def setup_corridor(
    room: Room,
    length: IntRange,
    columns: int,
    rows: int,
    first: bool,
    rng: RandomSource,
) -> Union[Corridor, Retry]:
    """Lay a corridor out of ``room``.

    The heading is random, but a corridor never leaves straight back the way
    the room was entered; that heading is rotated a quarter turn clockwise.
    The length is capped so the corridor and a room of the same size beyond
    it fit on the board. When the cap is below one tile there is no room to
    leave in that heading and a Retry is returned.

    Only the exit room is considered here; collisions with rooms placed
    later are caught by validation.
    """
    direction = Direction(rng.randrange(0, 4))
    if not first and room.entering_direction is not None and direction is room.entering_direction.opposite():
        direction = direction.rotate_clockwise()

    drawn = length.sample(rng)

    if direction is Direction.NORTH:
        start_x = draw_range(rng, room.x + 1, room.x + room.width - 2)
        start_y = room.y + room.height - 1
        max_length = rows - start_y - room.height
    elif direction is Direction.EAST:
        start_x = room.x + room.width - 1
        start_y = draw_range(rng, room.y + 1, room.y + room.height - 2)
        max_length = columns - start_x - room.width
    elif direction is Direction.SOUTH:
        start_x = draw_range(rng, room.x + 1, room.x + room.width - 2)
        start_y = room.y + 1
        max_length = start_y - room.height
    else:
        start_x = room.x + 1
        start_y = draw_range(rng, room.y + 1, room.y + room.height - 2)
        max_length = start_x - room.width

    if max_length < 1:
        logger.debug("Corridor heading %s has no space (max_length=%d)", direction.name, max_length)
        return Retry(
            RetryReason.CORRIDOR_NO_ROOM,
            f"no space heading {direction.name} from room at ({room.x},{room.y})",
        )

    return Corridor(
        start_x=start_x,
        start_y=start_y,
        length=_clamp(drawn, 1, max_length),
        direction=direction,
    )
