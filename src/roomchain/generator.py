from __future__ import annotations

import hashlib
import logging
import time
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .doorways import Doorway, doorways
from .errors import ConfigurationError, GenerationFailedError
from .geometry import Corridor, Room
from .grid import TileGrid
from .placement import setup_corridor, setup_first_room, setup_room
from .random_source import IntRange, RandomSource, SeededRandom
from .raster import rasterize
from .templates import RoomTemplate, TemplatePool
from .validation import Retry, validate_layout

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10000


@dataclass(frozen=True)
class Layout:
    """A finished dungeon: N rooms chained by N-1 corridors, and their tile grid.

    ``corridors[i]`` leads from ``rooms[i]`` to ``rooms[i + 1]``.
    """

    columns: int
    rows: int
    rooms: Tuple[Room, ...]
    corridors: Tuple[Corridor, ...]
    grid: TileGrid
    attempts: int = 1

    def doorways(self) -> List[Doorway]:
        return doorways(self.rooms, self.corridors)

    def signature(self) -> str:
        """Deterministic digest of the room/corridor geometry and tiles."""
        payload = {
            "columns": self.columns,
            "rows": self.rows,
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [c.to_dict() for c in self.corridors],
            "grid": self.grid.to_str_lines(),
        }
        raw = str(payload).encode("utf-8")
        h = hashlib.blake2b(raw, digest_size=16)
        return h.hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable summary for tooling and diffs."""
        return {
            "columns": self.columns,
            "rows": self.rows,
            "attempts": self.attempts,
            "signature": self.signature(),
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [c.to_dict() for c in self.corridors],
            "doorways": [d.to_dict() for d in self.doorways()],
            "grid": self.grid.to_str_lines(),
        }


class LayoutGenerator:
    """Rooms-and-corridors chain generator with whole-layout retry.

    Each attempt builds the full chain from scratch: a centered first room,
    then corridor, room, corridor, ... each placed relative to the previous
    piece. The chain is then checked for room/room overlap, corridor/corridor
    overlap and tiles off the board. Any failure throws the attempt away;
    nothing carries over between attempts except the random stream.

    Guarantees:
    - Deterministic layout given the same settings and seeded random source
    - Rooms never overlap; corridor footprints never overlap
    - Every room and corridor tile is on the board
    """

    def __init__(
        self,
        columns: int,
        rows: int,
        number_of_rooms: int,
        corridor_length: IntRange,
        pool: TemplatePool,
        rng: Optional[RandomSource] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        deadline_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if columns <= 0 or rows <= 0:
            raise ConfigurationError(f"Board must be at least 1x1, got {columns}x{rows}")
        if number_of_rooms <= 0:
            raise ConfigurationError(f"number_of_rooms must be positive, got {number_of_rooms}")
        if max_attempts <= 0:
            raise ConfigurationError(f"max_attempts must be positive, got {max_attempts}")
        self.columns = columns
        self.rows = rows
        self.number_of_rooms = number_of_rooms
        self.corridor_length = corridor_length
        self.pool = pool
        self.rng: RandomSource = rng if rng is not None else SeededRandom()
        self.max_attempts = max_attempts
        self.deadline_seconds = deadline_seconds
        self._clock = clock

    # ---- Sizing ----------------------------------------------------------
    def room_count(self) -> int:
        """Rooms per layout: the request, capped by what the template pool can supply."""
        capacity = self.pool.capacity()
        if capacity == 0:
            raise ConfigurationError("Template pool is empty; no room can be placed")
        return min(self.number_of_rooms, capacity)

    # ---- Building --------------------------------------------------------
    def _first_template(self, remaining: List[int]) -> RoomTemplate:
        if self.pool.start is not None:
            return self.pool.start
        template = self.pool.draw(remaining, self.rng)
        if template is None:
            # Only an end template is configured
            template = self.pool.end
        if template is None:
            raise ConfigurationError("Template pool is empty; no room can be placed")
        return template

    def _next_template(self, last: bool, remaining: List[int]) -> RoomTemplate:
        if last and self.pool.end is not None:
            return self.pool.end
        template = self.pool.draw(remaining, self.rng)
        if template is None:
            template = self.pool.end
        if template is None:
            raise ConfigurationError("Template pool ran out before the last room")
        return template

    def build(self, count: int) -> Union[Tuple[List[Room], List[Corridor]], Retry]:
        """Build one room/corridor chain of ``count`` rooms, without validating it."""
        remaining = self.pool.counters()
        rooms: List[Room] = [setup_first_room(self._first_template(remaining), self.columns, self.rows)]
        corridors: List[Corridor] = []
        if count == 1:
            return rooms, corridors

        corridor = setup_corridor(rooms[0], self.corridor_length, self.columns, self.rows, True, self.rng)
        if isinstance(corridor, Retry):
            return corridor
        corridors.append(corridor)

        for i in range(1, count):
            last = i == count - 1
            template = self._next_template(last, remaining)
            room = setup_room(template, self.columns, self.rows, corridors[i - 1], self.rng)
            rooms.append(room)
            if not last:
                corridor = setup_corridor(room, self.corridor_length, self.columns, self.rows, False, self.rng)
                if isinstance(corridor, Retry):
                    return corridor
                corridors.append(corridor)

        return rooms, corridors

    def attempt(self, count: int) -> Union[Layout, Retry]:
        """Run one build, validate, rasterize pass.

        Returns the Layout on success or the Retry that ended the attempt.
        """
        built = self.build(count)
        if isinstance(built, Retry):
            return built
        rooms, corridors = built

        problem = validate_layout(rooms, corridors, self.columns, self.rows)
        if problem is not None:
            return problem

        grid = rasterize(rooms, corridors, self.columns, self.rows)
        if isinstance(grid, Retry):
            return grid

        return Layout(
            columns=self.columns,
            rows=self.rows,
            rooms=tuple(rooms),
            corridors=tuple(corridors),
            grid=grid,
        )

    # ---- Orchestration ---------------------------------------------------
    def generate(self) -> Layout:
        """Retry whole-layout attempts until one is valid.

        Raises GenerationFailedError when ``max_attempts`` attempts fail or
        the optional deadline passes.
        """
        count = self.room_count()
        if count < self.number_of_rooms:
            logger.warning(
                "Requested %d rooms but the template pool supplies only %d; generating %d",
                self.number_of_rooms,
                count,
                count,
            )

        reasons: Counter = Counter()
        started = self._clock()
        for attempt in range(1, self.max_attempts + 1):
            if self.deadline_seconds is not None and self._clock() - started > self.deadline_seconds:
                raise GenerationFailedError(
                    f"Deadline of {self.deadline_seconds}s passed after {attempt - 1} attempts",
                    attempts=attempt - 1,
                    reasons=reasons,
                )

            outcome = self.attempt(count)
            if isinstance(outcome, Retry):
                reasons[outcome.reason] += 1
                logger.debug(
                    "Attempt %d retried (%s: %s)",
                    attempt,
                    outcome.reason.value,
                    outcome.detail,
                )
                continue

            layout = replace(outcome, attempts=attempt)
            logger.info(
                "Generated %d rooms on %dx%d board in %d attempts (signature=%s)",
                len(layout.rooms),
                self.columns,
                self.rows,
                attempt,
                layout.signature(),
            )
            return layout

        raise GenerationFailedError(
            f"Failed to generate dungeon within {self.max_attempts} attempts",
            attempts=self.max_attempts,
            reasons=reasons,
        )
