"""End-to-end tests of tavern generation.

Every generated tavern must satisfy the same structural invariants whatever
the seed, terrain or plot shape; these are checked over seed sweeps.
"""

from __future__ import annotations

import dataclasses
import logging
import random

import pytest

from taverngen import config
from taverngen.environment.generators.tavern import (
    FlatBarsRoof,
    FloorRoof,
    PlotTooSmallError,
    RoomKind,
    Tavern,
    generate_tavern_name,
)
from taverngen.environment.generators.tavern.details import (
    avoid_rects,
    decompose_free_floor,
)
from taverngen.environment.site import SiteGrid
from taverngen.environment.terrain import HeightField
from taverngen.util import rng
from taverngen.util.geometry import Aabr, Dir, Vec2
from taverngen.util.store import Id, StoreFrozenError
from tests.helpers import (
    AMPLE_TILES,
    coverage_mask,
    flat_terrain,
    generate_tavern,
    room_pairs,
    shares_volume,
)

SEEDS = range(12)

# =============================================================================
# Invariant checks
# =============================================================================


def assert_no_shared_volume(tavern: Tavern) -> None:
    for a, b in room_pairs(tavern.rooms):
        assert not shares_volume(a, b), f"{a.bounds} overlaps {b.bounds}"


def assert_doors_inside_walls(tavern: Tavern) -> None:
    for wall in tavern.doors():
        assert wall.door is not None
        door_min, door_max = wall.door
        assert 0 < door_min <= door_max < wall.length


def assert_sizes_conform(tavern: Tavern) -> None:
    for room in tavern.rooms:
        (min_side, max_side), (min_area, max_area) = room.kind.size_range()
        size = room.footprint.size()
        assert min_side <= size.reduce_min()
        assert size.reduce_max() <= max_side
        assert min_area <= size.product() <= max_area


def assert_entrance_at_door(tavern: Tavern) -> None:
    entrances = [
        room
        for room in tavern.rooms
        if room.kind is RoomKind.ENTRANCE
        or (room is tavern.entrance and room.kind is RoomKind.GARDEN)
    ]
    assert len(entrances) == 1
    assert entrances[0] is tavern.entrance
    assert tavern.entrance.footprint.expanded(1).contains_point(
        tavern.door_wpos.xy()
    )
    assert tavern.entrance.bounds.min.z == tavern.door_wpos.z


def assert_roofs_at_room_tops(tavern: Tavern) -> None:
    for room in tavern.rooms:
        assert room.roofs, f"room {room.bounds} has no roof"
        for roof_id in room.roofs:
            assert tavern.roofs[roof_id].min_z == room.bounds.max.z + 1
        for roof_id in room.floors:
            assert tavern.roofs[roof_id].min_z == room.bounds.min.z - 1


def assert_walls_enclose_rooms(tavern: Tavern) -> None:
    """Every voxel column along each side of a room is behind some wall."""
    for room in tavern.rooms:
        for dir, wall_ids in room.walls.items():
            orth = dir.orthogonal()
            covered: set[int] = set()
            for wall_id in wall_ids:
                wall = tavern.walls[wall_id]
                lo, hi = sorted((orth.select(wall.start), orth.select(wall.end)))
                covered.update(range(lo + 1, hi))
            side = range(
                orth.select(room.footprint.min), orth.select(room.footprint.max) + 1
            )
            assert set(side) <= covered, f"gap on {dir.name} of {room.bounds}"


def assert_detail_areas_disjoint(tavern: Tavern) -> None:
    for room in tavern.rooms:
        mask = coverage_mask(room.footprint, list(room.detail_areas))
        assert mask.max(initial=0) <= 1
        assert all(room.footprint.contains_aabr(a) for a in room.detail_areas)


def assert_free_floor_partitioned(tavern: Tavern) -> None:
    """Free floor plus kept-clear floor covers every room cell exactly once."""
    for room in tavern.rooms:
        footprint = room.footprint
        avoid = avoid_rects(room, tavern.walls, tavern.roofs)
        areas = decompose_free_floor(footprint, avoid)
        free = coverage_mask(footprint, areas)
        blocked = coverage_mask(footprint, avoid) > 0
        assert ((free + blocked) == 1).all(), f"floor of {room.bounds}"
        assert set(room.detail_areas) <= set(areas)


def assert_valid(tavern: Tavern) -> None:
    assert_no_shared_volume(tavern)
    assert_doors_inside_walls(tavern)
    assert_sizes_conform(tavern)
    assert_entrance_at_door(tavern)
    assert_roofs_at_room_tops(tavern)
    assert_walls_enclose_rooms(tavern)
    assert_detail_areas_disjoint(tavern)
    assert_free_floor_partitioned(tavern)


def structure_of(tavern: Tavern) -> tuple:
    """Comparable snapshot of everything generation decides."""
    rooms = tuple(
        (
            room.bounds,
            room.kind,
            tuple(room.walls.values()),
            room.floors,
            room.roofs,
            room.detail_areas,
            room.details,
        )
        for room in tavern.rooms
    )
    return rooms, tuple(tavern.walls), tuple(tavern.roofs), tavern.door_wpos


# =============================================================================
# Invariants
# =============================================================================


class TestInvariants:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_flat_plot(self, seed: int) -> None:
        assert_valid(generate_tavern(seed))

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sloped_plot(self, seed: int) -> None:
        terrain = HeightField.sloped(
            80, 80, base_alt=5.0, slope=(0.15, 0.1), temperature=0.8
        )
        assert_valid(generate_tavern(seed, terrain=terrain))

    @pytest.mark.parametrize("seed", SEEDS)
    def test_door_on_east_side(self, seed: int) -> None:
        tavern = generate_tavern(seed, door_tile=Vec2(9, 5), door_dir=Dir.X)
        assert_valid(tavern)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_rooms_stay_in_plot(self, seed: int) -> None:
        tavern = generate_tavern(seed)
        inner = Aabr(tavern.bounds.min + 1, tavern.bounds.max - 2)
        for room in tavern.rooms:
            assert inner.contains_aabr(room.footprint)


class TestDeterminism:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_same_seed_same_tavern(self, seed: int) -> None:
        assert structure_of(generate_tavern(seed)) == structure_of(
            generate_tavern(seed)
        )

    def test_different_seeds_differ(self) -> None:
        structures = {structure_of(generate_tavern(seed)) for seed in SEEDS}
        assert len(structures) > 1

    @staticmethod
    def from_global_streams(name: str | None = None) -> Tavern:
        return Tavern.generate(
            flat_terrain(),
            SiteGrid(),
            None,
            Vec2(4, 0),
            Dir.NEG_Y,
            AMPLE_TILES,
            name=name,
        )

    def test_global_streams_reproducible_after_init(self) -> None:
        rng.init(5)
        first = self.from_global_streams()
        rng.init(5)
        second = self.from_global_streams()

        assert structure_of(first) == structure_of(second)
        assert first.name == second.name

    def test_generated_name_does_not_shift_layout(self) -> None:
        rng.init(5)
        named = self.from_global_streams(name="The Test Tankard")
        rng.init(5)
        unnamed = self.from_global_streams()

        assert structure_of(named) == structure_of(unnamed)
        rng.init(5)
        name_stream = rng.get(config.TAVERN_NAME_RNG_DOMAIN)
        assert unnamed.name == generate_tavern_name(name_stream)


class TestImmutability:
    def test_stores_are_frozen(self) -> None:
        tavern = generate_tavern(0)
        with pytest.raises(StoreFrozenError):
            tavern.rooms.insert(tavern.entrance)
        with pytest.raises(StoreFrozenError):
            tavern.walls.insert(tavern.walls[Id(0)])
        with pytest.raises(StoreFrozenError):
            tavern.roofs.insert(tavern.roofs[Id(0)])

    def test_room_collections_are_tuples(self) -> None:
        room = generate_tavern(0).entrance
        for collection in (
            room.floors,
            room.roofs,
            room.detail_areas,
            room.details,
            *room.walls.values(),
        ):
            assert isinstance(collection, tuple)

    def test_tavern_fields_cannot_be_reassigned(self) -> None:
        tavern = generate_tavern(0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            tavern.name = "The Other Place"  # type: ignore[misc]


# =============================================================================
# Inputs
# =============================================================================


class TestInputs:
    def test_plot_without_interior_raises(self) -> None:
        with pytest.raises(PlotTooSmallError):
            generate_tavern(0, tile_aabr=Aabr.from_bounds(0, 0, 0, 0))

    def test_altitude_override(self) -> None:
        tavern = generate_tavern(0, alt=42)
        assert tavern.door_wpos.z == 42
        assert tavern.entrance.bounds.min.z == 42

    def test_altitude_sampled_at_door(self) -> None:
        tavern = generate_tavern(0, terrain=flat_terrain(alt=7.3))
        assert tavern.door_wpos.z == 8

    def test_door_on_plot_edge(self) -> None:
        tavern = generate_tavern(0)
        inner = Aabr(tavern.bounds.min + 1, tavern.bounds.max - 2)
        assert tavern.door_wpos.y == inner.min.y
        assert tavern.door_tile == Vec2(4, 0)

    def test_explicit_and_generated_names(self) -> None:
        assert generate_tavern(0).name == "The Test Tankard"
        tavern = Tavern.generate(
            flat_terrain(),
            SiteGrid(),
            random.Random(0),
            Vec2(4, 0),
            Dir.NEG_Y,
            Aabr.from_bounds(0, 0, 9, 9),
        )
        assert tavern.name.startswith("The ")

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="taverngen"):
            generate_tavern(0)
        assert any("Generated tavern" in r.getMessage() for r in caplog.records)


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_entrance_only_plot(self, seed: int) -> None:
        """A plot that only holds the entrance hall yields exactly that room."""
        tavern = generate_tavern(
            seed,
            terrain=flat_terrain(temperature=-1.0),
            site=SiteGrid(tile_size=4),
            tile_aabr=Aabr.from_bounds(0, 0, 2, 2),
            door_tile=Vec2(1, 0),
        )
        assert [room.kind for room in tavern.rooms] == [RoomKind.ENTRANCE]
        assert tavern.entrance.footprint == Aabr.from_bounds(1, 1, 6, 6)
        assert tavern.stairs_count() == 0
        assert_valid(tavern)

    @pytest.mark.parametrize("seed", range(30))
    def test_cellars_only_under_bars(self, seed: int) -> None:
        tavern = generate_tavern(seed)
        counts = tavern.room_counts()
        if counts[RoomKind.CELLAR]:
            assert counts[RoomKind.BAR]
        bars = [room for room in tavern.rooms if room.kind is RoomKind.BAR]
        for room in tavern.rooms:
            if room.kind is not RoomKind.CELLAR:
                continue
            assert any(
                room.bounds.max.z < bar.bounds.min.z
                and room.footprint.collides_with_aabr(bar.footprint)
                for bar in bars
            ) or any(
                other.kind is RoomKind.CELLAR and other is not room
                for other in tavern.rooms
            )

    @pytest.mark.parametrize("seed", range(30))
    def test_flat_bars_only_over_gardens(self, seed: int) -> None:
        tavern = generate_tavern(seed, terrain=flat_terrain(temperature=1.0))
        for roof_id, roof in tavern.roofs.items():
            covered = [room for room in tavern.rooms if roof_id in room.roofs]
            if isinstance(roof.style, FlatBarsRoof):
                assert all(room.kind is RoomKind.GARDEN for room in covered)
            if isinstance(roof.style, FloorRoof):
                assert any(roof_id in room.floors for room in tavern.rooms)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_narrow_plot_blocks_growth(self, seed: int) -> None:
        """Growth that keeps running out of space still ends in a valid tavern."""
        first = generate_tavern(seed, tile_aabr=Aabr.from_bounds(0, 0, 9, 2))
        second = generate_tavern(seed, tile_aabr=Aabr.from_bounds(0, 0, 9, 2))
        assert_valid(first)
        assert structure_of(first) == structure_of(second)
