"""Terrain sampling for site generation.

Generators only see the ``TerrainSampler`` protocol: an approximate ground
altitude and a biome temperature at a world position. ``HeightField`` is the
reference implementation, backed by two numpy grids sampled with bilinear
interpolation.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from taverngen.types import Temperature
from taverngen.util.geometry import Vec2


class TerrainSampler(Protocol):
    """Read-only view of the ground a site is built on."""

    def get_alt_approx(self, wpos: Vec2) -> float:
        """Approximate ground altitude at a world position."""
        ...

    def get_temperature(self, wpos: Vec2) -> Temperature:
        """Interpolated biome temperature at a world position."""
        ...


class HeightField:
    """Terrain sampler over regularly spaced altitude and temperature samples.

    Sample ``[i, j]`` of each grid sits at world position
    ``origin + (i, j) * cell_size``. Positions outside the grid are clamped
    to the nearest edge sample.

    Attributes:
        alt: 2D float array of ground altitudes. Shape: (width, height).
        temp: 2D float array of biome temperatures, same shape as ``alt``.
        origin: World position of sample ``[0, 0]``.
        cell_size: World distance between neighbouring samples.
    """

    def __init__(
        self,
        alt: np.ndarray,
        temp: np.ndarray,
        origin: Vec2 = Vec2(0, 0),
        cell_size: int = 1,
    ) -> None:
        if alt.ndim != 2:
            raise ValueError(f"Altitude grid must be 2D, got shape {alt.shape}")
        if alt.shape != temp.shape:
            raise ValueError(
                f"Altitude {alt.shape} and temperature {temp.shape} grids differ"
            )
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.alt = np.asarray(alt, dtype=np.float64)
        self.temp = np.asarray(temp, dtype=np.float64)
        self.origin = origin
        self.cell_size = cell_size

    @classmethod
    def flat(
        cls,
        width: int,
        height: int,
        alt: float = 0.0,
        temperature: float = 0.0,
        origin: Vec2 = Vec2(0, 0),
        cell_size: int = 1,
    ) -> HeightField:
        """Create a level field with uniform temperature."""
        return cls(
            np.full((width, height), alt, dtype=np.float64),
            np.full((width, height), temperature, dtype=np.float64),
            origin=origin,
            cell_size=cell_size,
        )

    @classmethod
    def sloped(
        cls,
        width: int,
        height: int,
        base_alt: float,
        slope: tuple[float, float],
        temperature: float = 0.0,
        origin: Vec2 = Vec2(0, 0),
    ) -> HeightField:
        """Create a planar field rising by ``slope`` per voxel along x and y."""
        xs = np.arange(width, dtype=np.float64)[:, np.newaxis]
        ys = np.arange(height, dtype=np.float64)[np.newaxis, :]
        alt = base_alt + xs * slope[0] + ys * slope[1]
        return cls(alt, np.full((width, height), temperature), origin=origin)

    def get_alt_approx(self, wpos: Vec2) -> float:
        return self._sample(self.alt, wpos)

    def get_temperature(self, wpos: Vec2) -> Temperature:
        return Temperature(self._sample(self.temp, wpos))

    def _sample(self, grid: np.ndarray, wpos: Vec2) -> float:
        """Bilinear sample of ``grid`` at a world position, clamped to edges."""
        max_i = grid.shape[0] - 1
        max_j = grid.shape[1] - 1
        fx = min(max((wpos.x - self.origin.x) / self.cell_size, 0.0), float(max_i))
        fy = min(max((wpos.y - self.origin.y) / self.cell_size, 0.0), float(max_j))

        i0 = int(np.floor(fx))
        j0 = int(np.floor(fy))
        i1 = min(i0 + 1, max_i)
        j1 = min(j0 + 1, max_j)
        tx = fx - i0
        ty = fy - j0

        top = grid[i0, j0] * (1.0 - tx) + grid[i1, j0] * tx
        bottom = grid[i0, j1] * (1.0 - tx) + grid[i1, j1] * tx
        return float(top * (1.0 - ty) + bottom * ty)
