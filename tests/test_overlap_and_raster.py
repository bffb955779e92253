from roomchain.geometry import Corridor, Direction, Rect, Room
from roomchain.grid import TileGrid, TileType
from roomchain.raster import rasterize
from roomchain.validation import (
    Retry,
    RetryReason,
    find_corridor_overlap,
    find_room_overlap,
    validate_layout,
)


def test_rect_overlap_is_strict():
    a = Rect(0, 0, 5, 5)
    assert a.overlaps(Rect(4, 4, 5, 5))
    # Sharing an edge is not an overlap
    assert not a.overlaps(Rect(5, 0, 5, 5))
    assert not a.overlaps(Rect(0, 5, 5, 5))
    # Empty rectangles never overlap
    assert not a.overlaps(Rect(1, 1, 0, 3))


def test_room_overlap_finds_first_pair():
    rooms = [Room(0, 0, 5, 5), Room(10, 10, 5, 5), Room(12, 12, 4, 4)]
    assert find_room_overlap(rooms) == (1, 2)
    assert find_room_overlap(rooms[:2]) is None


def test_corridor_footprint_is_three_wide_and_skips_first_tile():
    assert Corridor(4, 6, 5, Direction.NORTH).footprint() == Rect(4, 7, 3, 4)
    assert Corridor(4, 6, 5, Direction.SOUTH).footprint() == Rect(4, 5, 3, 4)
    assert Corridor(4, 6, 5, Direction.EAST).footprint() == Rect(5, 6, 4, 3)
    assert Corridor(4, 6, 5, Direction.WEST).footprint() == Rect(3, 6, 4, 3)


def test_corridor_overlap_detects_crossing_strips():
    vertical = Corridor(10, 2, 8, Direction.NORTH)
    horizontal = Corridor(6, 5, 8, Direction.EAST)
    far_away = Corridor(30, 30, 4, Direction.WEST)
    assert find_corridor_overlap([vertical, horizontal]) == (0, 1)
    assert find_corridor_overlap([vertical, far_away]) is None


def test_single_tile_corridor_has_no_footprint():
    stub = Corridor(10, 5, 1, Direction.NORTH)
    other = Corridor(10, 5, 6, Direction.NORTH)
    assert find_corridor_overlap([stub, other]) is None


def test_corridor_end_derivation():
    assert (Corridor(5, 5, 3, Direction.NORTH).end_x, Corridor(5, 5, 3, Direction.NORTH).end_y) == (5, 8)
    assert (Corridor(5, 5, 3, Direction.EAST).end_x, Corridor(5, 5, 3, Direction.EAST).end_y) == (8, 5)
    assert (Corridor(5, 5, 3, Direction.SOUTH).end_x, Corridor(5, 5, 3, Direction.SOUTH).end_y) == (5, 2)
    assert (Corridor(5, 5, 3, Direction.WEST).end_x, Corridor(5, 5, 3, Direction.WEST).end_y) == (2, 5)


def test_validate_reports_each_failure_kind():
    ok_rooms = [Room(1, 1, 3, 3), Room(6, 1, 3, 3)]
    ok_corridors = [Corridor(3, 2, 3, Direction.EAST)]
    assert validate_layout(ok_rooms, ok_corridors, 10, 10) is None

    overlapping = validate_layout([Room(1, 1, 3, 3), Room(2, 2, 3, 3)], [Corridor(3, 2, 3, Direction.EAST)], 10, 10)
    assert overlapping.reason is RetryReason.ROOM_OVERLAP

    off_board = validate_layout([Room(1, 1, 3, 3), Room(8, 1, 3, 3)], [Corridor(3, 2, 5, Direction.EAST)], 10, 10)
    assert off_board.reason is RetryReason.OUT_OF_BOUNDS

    corridor_off = validate_layout([Room(1, 1, 3, 3), Room(5, 5, 3, 3)], [Corridor(1, 2, 3, Direction.WEST)], 10, 10)
    assert corridor_off.reason is RetryReason.OUT_OF_BOUNDS
    assert "corridor 0" in corridor_off.detail


def test_rasterize_rooms_then_corridors():
    rooms = [Room(1, 1, 3, 3)]
    corridors = [Corridor(3, 2, 4, Direction.EAST)]
    grid = rasterize(rooms, corridors, 10, 10)
    assert isinstance(grid, TileGrid)
    assert [c for c in grid.cells_of(TileType.CORRIDOR)] == [(3, 2), (4, 2), (5, 2), (6, 2)]
    # Corridor overwrote the one wall tile it starts on
    assert grid.count(TileType.ROOM) == 8
    assert grid.count(TileType.NULL) == 100 - 8 - 4
    assert grid.get_tile(3, 2) is TileType.CORRIDOR
    assert grid.get_tile(0, 0) is TileType.NULL


def test_rasterize_aborts_on_first_off_board_write():
    outcome = rasterize([Room(1, 1, 3, 3)], [Corridor(1, 2, 4, Direction.WEST)], 10, 10)
    assert isinstance(outcome, Retry)
    assert outcome.reason is RetryReason.OUT_OF_BOUNDS

    room_off = rasterize([Room(8, 8, 3, 3)], [], 10, 10)
    assert isinstance(room_off, Retry)
    assert "room 0" in room_off.detail


def test_rasterize_is_idempotent():
    rooms = [Room(2, 2, 4, 4), Room(2, 9, 4, 4)]
    corridors = [Corridor(3, 5, 4, Direction.NORTH)]
    a = rasterize(rooms, corridors, 12, 14)
    b = rasterize(rooms, corridors, 12, 14)
    assert a == b
    assert a.snapshot() == b.snapshot()
