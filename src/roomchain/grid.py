from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, List, Tuple

from .errors import ConfigurationError, OutOfBoundsError
from .geometry import Cell

logger = logging.getLogger(__name__)


class TileType(Enum):
    NULL = 0
    ROOM = 1
    CORRIDOR = 2


_SYMBOLS = {
    TileType.NULL: ".",
    TileType.ROOM: "#",
    TileType.CORRIDOR: "+",
}


class TileGrid:
    """
    Board of typed tiles, ``columns`` wide and ``rows`` high.

    Coordinates are (x, y) with (0, 0) at the lower-left; x grows east and
    y grows north. Storage is row-major (``tiles[y][x]``). Every access is
    bounds-checked and raises OutOfBoundsError outside the board.
    """

    def __init__(self, columns: int, rows: int, default: TileType = TileType.NULL) -> None:
        if columns <= 0 or rows <= 0:
            raise ConfigurationError(f"Board must be at least 1x1, got {columns}x{rows}")
        self.columns = columns
        self.rows = rows
        self._tiles: List[List[TileType]] = [[default for _ in range(columns)] for _ in range(rows)]

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.columns and 0 <= y < self.rows

    def get_tile(self, x: int, y: int) -> TileType:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"Tile out of bounds: ({x},{y}) not in [0,{self.columns})x[0,{self.rows})")
        return self._tiles[y][x]

    def set_tile(self, x: int, y: int, t: TileType) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"Tile out of bounds: ({x},{y}) not in [0,{self.columns})x[0,{self.rows})")
        self._tiles[y][x] = t

    # ---- Query -----------------------------------------------------------
    def count(self, t: TileType) -> int:
        return sum(1 for row in self._tiles for tile in row if tile is t)

    def cells_of(self, t: TileType) -> Iterator[Cell]:
        for y, row in enumerate(self._tiles):
            for x, tile in enumerate(row):
                if tile is t:
                    yield x, y

    # ---- Export / Compare -----------------------------------------------
    def to_str_lines(self) -> List[str]:
        """Render rows top (north) first, one character per tile."""
        return ["".join(_SYMBOLS[t] for t in self._tiles[y]) for y in range(self.rows - 1, -1, -1)]

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """
        Deterministic, hashable snapshot of the tiles for equality tests.
        """
        return tuple(tuple(t.value for t in row) for row in self._tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return self.columns == other.columns and self.rows == other.rows and self.snapshot() == other.snapshot()

    def __repr__(self) -> str:
        return f"TileGrid(columns={self.columns}, rows={self.rows})"
