"""Tests for the numpy-backed terrain sampler."""

from __future__ import annotations

import numpy as np
import pytest

from taverngen.environment.terrain import HeightField
from taverngen.util.geometry import Vec2


class TestHeightField:
    def test_flat_field_is_uniform(self) -> None:
        field = HeightField.flat(8, 8, alt=12.5, temperature=0.3)
        assert field.get_alt_approx(Vec2(3, 4)) == pytest.approx(12.5)
        assert field.get_temperature(Vec2(0, 7)) == pytest.approx(0.3)

    def test_samples_interpolate_between_cells(self) -> None:
        alt = np.array([[0.0, 0.0], [10.0, 10.0]])
        field = HeightField(alt, np.zeros_like(alt), cell_size=10)
        assert field.get_alt_approx(Vec2(5, 0)) == pytest.approx(5.0)
        assert field.get_alt_approx(Vec2(5, 7)) == pytest.approx(5.0)

    def test_positions_outside_are_clamped(self) -> None:
        field = HeightField.sloped(4, 4, base_alt=0.0, slope=(1.0, 0.0))
        assert field.get_alt_approx(Vec2(-10, 0)) == pytest.approx(0.0)
        assert field.get_alt_approx(Vec2(100, 2)) == pytest.approx(3.0)

    def test_origin_offsets_samples(self) -> None:
        field = HeightField.sloped(
            4, 4, base_alt=0.0, slope=(0.0, 2.0), origin=Vec2(100, 100)
        )
        assert field.get_alt_approx(Vec2(100, 101)) == pytest.approx(2.0)

    def test_rejects_mismatched_grids(self) -> None:
        with pytest.raises(ValueError):
            HeightField(np.zeros((4, 4)), np.zeros((3, 4)))

    def test_rejects_non_2d_grid(self) -> None:
        with pytest.raises(ValueError):
            HeightField(np.zeros(4), np.zeros(4))

    def test_rejects_non_positive_cell_size(self) -> None:
        with pytest.raises(ValueError):
            HeightField(np.zeros((2, 2)), np.zeros((2, 2)), cell_size=0)
