"""Architectural room categories and the rules for picking them.

Each ``RoomKind`` knows how big it may be, how likely it is to appear given
what has already been built, and which kinds may be grown off it sideways or
underneath. Sizes follow the inclusive-corner convention of
``taverngen.util.geometry``: a side length is ``max - min``.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import TypeAlias

from taverngen.types import IntRange, Temperature
from taverngen.util.geometry import Aabr
from taverngen.util.lottery import Lottery

RoomCounts: TypeAlias = "Counter[RoomKind]"


class RoomKind(Enum):
    """Purpose of a room inside the tavern."""

    GARDEN = "garden"
    STAGE = "stage"
    BAR = "bar"
    SEATING = "seating"
    ENTRANCE = "entrance"
    CELLAR = "cellar"

    def size_range(self) -> tuple[IntRange, IntRange]:
        """Return the (side length range, area range), both inclusive."""
        return _SIZE_RANGES[self]

    def chance(self, room_counts: RoomCounts) -> float:
        """Base weight of adding another room of this kind.

        Repetition is discouraged: a second stage never happens, a second bar
        almost never, and gardens fall off quadratically.
        """
        count = room_counts[self]
        match self:
            case RoomKind.GARDEN:
                return 0.05 / (1.0 + count) ** 2
            case RoomKind.SEATING:
                return 0.4 / (1.0 + count)
            case RoomKind.STAGE:
                return 1.0 if count == 0 else 0.0
            case RoomKind.BAR:
                if count == 0:
                    return 1.0
                return 0.01 if count == 1 else 0.0
            case RoomKind.ENTRANCE:
                return 0.0
            case RoomKind.CELLAR:
                return 1.0

    def fits(self, max_bounds: Aabr) -> bool:
        """Whether the smallest side and area of ``max_bounds`` allow this kind."""
        (min_side, _), (min_area, _) = self.size_range()
        size = max_bounds.size()
        return min_side <= size.reduce_min() and min_area <= size.product()

    def accepts(self, bounds: Aabr) -> bool:
        """Whether ``bounds`` is within both the side and area ranges."""
        (min_side, max_side), (min_area, max_area) = self.size_range()
        size = bounds.size()
        return (
            bounds.is_valid()
            and min_side <= size.reduce_min()
            and size.reduce_max() <= max_side
            and min_area <= size.product() <= max_area
        )

    def side_rooms(self) -> tuple[RoomKind, ...]:
        """Kinds that may be grown sideways off a room of this kind."""
        if self is RoomKind.CELLAR:
            return (RoomKind.CELLAR,)
        return (RoomKind.STAGE, RoomKind.GARDEN, RoomKind.BAR, RoomKind.SEATING)

    def basement_rooms(self) -> tuple[RoomKind, ...]:
        """Kinds that may be dug out underneath a room of this kind."""
        if self is RoomKind.BAR:
            return (RoomKind.CELLAR,)
        return ()

    # -------------------------------------------------------------------------
    # Lotteries
    # -------------------------------------------------------------------------

    @staticmethod
    def entrance_room_lottery(
        temperature: Temperature, max_bounds: Aabr | None = None
    ) -> Lottery[RoomKind]:
        """Lottery for the room behind the front door.

        Warm climates may open onto a garden instead of an entrance hall.
        The garden is only offered when it could fit in ``max_bounds``.
        """
        garden_weight = 0.5 * temperature
        if max_bounds is not None and not RoomKind.GARDEN.fits(max_bounds):
            garden_weight = 0.0
        return Lottery(
            [
                (garden_weight, RoomKind.GARDEN),
                (2.0, RoomKind.ENTRANCE),
            ]
        )

    def side_room_lottery(
        self,
        max_bounds: Aabr,
        room_counts: RoomCounts,
        temperature: Temperature,
    ) -> Lottery[RoomKind] | None:
        """Lottery over the kinds that may grow off this room into ``max_bounds``.

        Returns None when no kind fits or every candidate has zero weight.
        """
        entries = []
        for kind in self.side_rooms():
            if not kind.fits(max_bounds):
                continue
            temp_scale = temperature if kind is RoomKind.GARDEN else 1.0
            entries.append((kind.chance(room_counts) * temp_scale, kind))
        if not any(weight > 0.0 for weight, _ in entries):
            return None
        return Lottery(entries)

    def basement_lottery(
        self, max_bounds: Aabr, room_counts: RoomCounts
    ) -> Lottery[RoomKind] | None:
        """Lottery over the kinds that may be dug out under this room."""
        entries = [
            (kind.chance(room_counts), kind)
            for kind in self.basement_rooms()
            if kind.fits(max_bounds)
        ]
        if not any(weight > 0.0 for weight, _ in entries):
            return None
        return Lottery(entries)


_SIZE_RANGES: dict[RoomKind, tuple[IntRange, IntRange]] = {
    RoomKind.GARDEN: ((5, 20), (35, 250)),
    RoomKind.SEATING: ((4, 20), (35, 250)),
    RoomKind.CELLAR: ((6, 12), (35, 110)),
    RoomKind.STAGE: ((11, 22), (150, 400)),
    RoomKind.BAR: ((9, 16), (80, 196)),
    RoomKind.ENTRANCE: ((3, 7), (12, 40)),
}
