from __future__ import annotations

from typing import NewType, TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

VoxelCoord: TypeAlias = int  # Always integer voxel position

# World coordinates - absolute voxel positions
WorldCoord: TypeAlias = VoxelCoord  # Example: x=120, y=-48

# Plot tiles - coarse grid the site is laid out on
TileCoord: TypeAlias = int  # Example: tile x=3 covers world x=18..23 with 6-voxel tiles

# Altitude of a voxel layer (z axis)
Altitude: TypeAlias = int

# Inclusive (min, max) interval along one axis
IntRange: TypeAlias = tuple[int, int]

# =============================================================================
# GENERATION-RELATED TYPES
# =============================================================================

# Random seed for deterministic generation.
# Can be an int for numeric seeds or a descriptive string like "burrito1".
RandomSeed: TypeAlias = int | str | None

# 32-bit seed drawn from a random stream to replay a single weighted choice.
LotterySeed = NewType("LotterySeed", int)

# Biome temperature sampled from the terrain. Roughly -1.0 (arctic) to 1.0
# (desert); gardens only appear where it is positive.
Temperature = NewType("Temperature", float)
