"""Tests for the room-kind catalog and its lotteries."""

from __future__ import annotations

from collections import Counter

import pytest

from taverngen.environment.generators.tavern import RoomKind
from taverngen.types import Temperature
from taverngen.util.geometry import Aabr

ROOMY = Aabr.from_bounds(0, 0, 40, 40)


class TestSizeRanges:
    @pytest.mark.parametrize("kind", list(RoomKind))
    def test_ranges_are_well_formed(self, kind: RoomKind) -> None:
        (min_side, max_side), (min_area, max_area) = kind.size_range()
        assert 0 < min_side <= max_side
        assert 0 < min_area <= max_area
        assert min_side * min_side <= max_area

    def test_fits_checks_smallest_side_and_area(self) -> None:
        assert RoomKind.ENTRANCE.fits(Aabr.from_bounds(0, 0, 4, 3))
        assert not RoomKind.ENTRANCE.fits(Aabr.from_bounds(0, 0, 4, 2))
        assert not RoomKind.STAGE.fits(Aabr.from_bounds(0, 0, 12, 10))

    def test_accepts_rejects_oversized_rooms(self) -> None:
        assert RoomKind.ENTRANCE.accepts(Aabr.from_bounds(0, 0, 5, 5))
        assert not RoomKind.ENTRANCE.accepts(Aabr.from_bounds(0, 0, 8, 4))
        assert not RoomKind.BAR.accepts(Aabr.from_bounds(0, 0, 16, 16))


class TestChance:
    def test_stage_is_unique(self) -> None:
        assert RoomKind.STAGE.chance(Counter()) == 1.0
        assert RoomKind.STAGE.chance(Counter({RoomKind.STAGE: 1})) == 0.0

    def test_second_bar_is_rare_and_third_impossible(self) -> None:
        assert RoomKind.BAR.chance(Counter({RoomKind.BAR: 1})) == pytest.approx(0.01)
        assert RoomKind.BAR.chance(Counter({RoomKind.BAR: 2})) == 0.0

    def test_repetition_lowers_weight(self) -> None:
        for kind in (RoomKind.GARDEN, RoomKind.SEATING):
            assert kind.chance(Counter({kind: 2})) < kind.chance(Counter())

    def test_entrance_never_grows(self) -> None:
        assert RoomKind.ENTRANCE.chance(Counter()) == 0.0


class TestAdjacency:
    def test_only_bars_get_basements(self) -> None:
        for kind in RoomKind:
            expected = (RoomKind.CELLAR,) if kind is RoomKind.BAR else ()
            assert kind.basement_rooms() == expected

    def test_cellars_only_extend_into_cellars(self) -> None:
        assert RoomKind.CELLAR.side_rooms() == (RoomKind.CELLAR,)
        assert RoomKind.CELLAR not in RoomKind.BAR.side_rooms()


class TestLotteries:
    def test_cold_entrance_is_always_a_hall(self) -> None:
        lottery = RoomKind.entrance_room_lottery(Temperature(-0.5), ROOMY)
        assert list(lottery.items()) == [(2.0, RoomKind.ENTRANCE)]

    def test_warm_entrance_may_be_a_garden(self) -> None:
        lottery = RoomKind.entrance_room_lottery(Temperature(1.0), ROOMY)
        assert RoomKind.GARDEN in lottery

    def test_garden_entrance_needs_space(self) -> None:
        small = Aabr.from_bounds(0, 0, 6, 4)
        lottery = RoomKind.entrance_room_lottery(Temperature(1.0), small)
        assert RoomKind.GARDEN not in lottery

    def test_side_lottery_excludes_kinds_that_do_not_fit(self) -> None:
        narrow = Aabr.from_bounds(0, 0, 9, 40)
        lottery = RoomKind.ENTRANCE.side_room_lottery(
            narrow, Counter(), Temperature(0.5)
        )
        assert lottery is not None
        assert RoomKind.STAGE not in lottery
        assert RoomKind.BAR in lottery

    def test_side_lottery_empty_when_nothing_fits(self) -> None:
        tiny = Aabr.from_bounds(0, 0, 3, 3)
        assert (
            RoomKind.SEATING.side_room_lottery(tiny, Counter(), Temperature(0.5))
            is None
        )

    def test_basement_lottery(self) -> None:
        lottery = RoomKind.BAR.basement_lottery(ROOMY, Counter())
        assert lottery is not None
        assert list(lottery.items()) == [(1.0, RoomKind.CELLAR)]
        assert RoomKind.SEATING.basement_lottery(ROOMY, Counter()) is None
