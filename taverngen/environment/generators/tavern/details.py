"""Free-floor decomposition and furnishing."""

from __future__ import annotations

from collections.abc import Callable

from taverngen import config
from taverngen.util.geometry import ALL_DIRS, Aabr, Vec2
from taverngen.util.rng import RandomSource, gen_bool
from taverngen.util.store import Store

from .room_kinds import RoomKind
from .structure import BarDetail, Roof, Room, StageDetail, TableDetail, Wall


def avoid_rects(room: Room, walls: Store[Wall], roofs: Store[Roof]) -> list[Aabr]:
    """Floor rectangles in ``room`` that must stay free of furniture.

    That is the walkway from every door to the middle of the room, and any
    staircase in or out of the room. Every rectangle is clipped to the room.
    """
    bounds = room.footprint
    center = bounds.center()
    rects: list[Aabr] = []

    for dir, wall_ids in room.walls.items():
        for wall_id in wall_ids:
            door = walls[wall_id].door_bounds()
            if door is None:
                continue
            walkway = Aabr(
                dir.select_aabr_with(bounds, door.min),
                dir.select_with(center, door.max),
            ).made_valid()
            rects.append(walkway)

    for roof_id in [*room.floors, *room.roofs]:
        stairs = roofs[roof_id].stairs
        if stairs is not None:
            rects.append(stairs.bounds.to_aabr())

    clipped = (rect.intersection(bounds) for rect in rects)
    return [rect for rect in clipped if rect.is_valid()]


def decompose_free_floor(bounds: Aabr, avoid: list[Aabr]) -> list[Aabr]:
    """Split the cells of ``bounds`` not covered by ``avoid`` into rectangles.

    Sweeps columns from min x to max x. At each uncovered cell a rectangle is
    grown up the column until the next obstacle, then widened towards +x
    until an obstacle overlapping its rows. Each emitted rectangle becomes an
    obstacle itself, so the result covers every free cell exactly once.
    """
    obstacles = list(avoid)
    areas: list[Aabr] = []

    for x in range(bounds.min.x, bounds.max.x + 1):
        y = bounds.min.y
        while y <= bounds.max.y:
            point = Vec2(x, y)
            blocker = next((a for a in obstacles if a.contains_point(point)), None)
            if blocker is not None:
                y = blocker.max.y + 1
                continue

            max_y = bounds.max.y
            for a in obstacles:
                if a.min.x <= x <= a.max.x and y < a.min.y <= max_y:
                    max_y = a.min.y - 1

            max_x = min(
                (
                    a.min.x - 1
                    for a in obstacles
                    if a.min.x > x and a.min.y <= max_y and a.max.y >= y
                ),
                default=bounds.max.x,
            )
            max_x = min(max_x, bounds.max.x)

            area = Aabr(point, Vec2(max_x, max_y))
            obstacles.append(area)
            areas.append(area)
            y = max_y + 1

    return areas


def place_table(pos: Vec2, area: Aabr) -> TableDetail:
    """Table at ``pos`` with a chair on every side that is still inside ``area``."""
    chairs = tuple(dir for dir in ALL_DIRS if area.contains_point(pos + dir.to_vec2()))
    return TableDetail(pos, chairs)


def _place_tables(room: Room, chance: float, source: RandomSource) -> None:
    remaining: list[Aabr] = []
    for area in room.detail_areas:
        if area.size().reduce_max() > 1 and gen_bool(source, chance):
            room.details.append(place_table(area.center(), area))
        else:
            remaining.append(area)
    room.detail_areas = remaining


def _take_best_area(room: Room, score: Callable[[Aabr], int]) -> Aabr | None:
    """Remove and return the detail area with the highest positive score."""
    best_idx = None
    best_score = 0
    for idx, area in enumerate(room.detail_areas):
        value = score(area)
        if value > best_score:
            best_idx, best_score = idx, value
    if best_idx is None:
        return None
    return room.detail_areas.pop(best_idx)


def _edges_touched(room_aabr: Aabr, area: Aabr) -> int:
    return sum(dir.select_aabr(area) == dir.select_aabr(room_aabr) for dir in ALL_DIRS)


def furnish(room: Room, source: RandomSource) -> None:
    """Turn some of ``room.detail_areas`` into furniture, by room kind.

    Seating rooms and gardens get tables. A stage takes the biggest area
    along the walls, a bar the biggest one touching any wall; both then add
    tables on what is left. Entrances and cellars stay empty.
    """
    room_aabr = room.footprint
    match room.kind:
        case RoomKind.GARDEN | RoomKind.SEATING:
            _place_tables(room, config.SEATING_TABLE_CHANCE, source)
        case RoomKind.STAGE:
            stage = _take_best_area(
                room, lambda a: _edges_touched(room_aabr, a) * a.area()
            )
            if stage is not None:
                room.details.append(StageDetail(stage))
            _place_tables(room, config.STAGE_TABLE_CHANCE, source)
        case RoomKind.BAR:
            bar = _take_best_area(
                room, lambda a: min(_edges_touched(room_aabr, a), 1) * a.area()
            )
            if bar is not None:
                room.details.append(BarDetail(bar))
            _place_tables(room, config.BAR_TABLE_CHANCE, source)
        case RoomKind.ENTRANCE | RoomKind.CELLAR:
            pass


def furnish_rooms(
    rooms: Store[Room], walls: Store[Wall], roofs: Store[Roof], source: RandomSource
) -> None:
    """Compute the free floor of every room, then furnish it."""
    for room in rooms:
        room.detail_areas = decompose_free_floor(
            room.footprint, avoid_rects(room, walls, roofs)
        )
        furnish(room, source)
