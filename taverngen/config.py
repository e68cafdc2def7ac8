"""
Configuration constants.

Centralizes the magic numbers used by the tavern generator.
Organized by functional area for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED = "burrito1"

# Stream names used with taverngen.util.rng
TAVERN_RNG_DOMAIN = "site.tavern"
TAVERN_NAME_RNG_DOMAIN = "site.tavern.name"

# =============================================================================
# SITE
# =============================================================================

# Width of one plot tile in world voxels
SITE_TILE_SIZE = 6

# Inner margin between plot bounds and usable room space (min side, max side)
PLOT_MARGIN_MIN = 1
PLOT_MARGIN_MAX = 2

# =============================================================================
# ROOM GROWTH
# =============================================================================

ENTRANCE_HEIGHT_RANGE = (3, 4)
ROOM_HEIGHT_RANGE = (3, 5)

# Drawn room sides within this distance of the available space snap to it,
# so growth does not leave unusable slivers behind.
SIZE_SNAP_TOLERANCE = 2

# Gap kept between a room and any room it does not share a wall with
ROOM_CLEARANCE = 2

# Longest staircase allowed between a room and one grown off it
MAX_STAIR_LENGTH = 5

# Vertical gap between a room's floor and the top of a basement under it
BASEMENT_DROP = 2

# =============================================================================
# WALLS & DOORS
# =============================================================================

NEIGHBOUR_DOOR_CHANCE = 0.8

# A neighbour door needs more than this much shared wall...
NEIGHBOUR_DOOR_MIN_WIDTH = 2
# ...more than this much shared height...
NEIGHBOUR_DOOR_MIN_HEIGHT = 3
# ...and floors closer than this.
NEIGHBOUR_DOOR_MAX_STEP = 4

# =============================================================================
# ROOFS
# =============================================================================

ROOF_OVERHANG = 2
ROOF_MERGE_TOLERANCE = 2

FLAT_ROOF_WEIGHT = 0.5
FLAT_BARS_ROOF_WEIGHT = 5.0
GABLE_ROOF_WEIGHT = 1.0
LEAN_TO_ROOF_WEIGHT = 1.0
HIP_ROOF_WEIGHT = 0.8

# Peak heights above the roof base
MIN_GABLE_PEAK = 3
MIN_LEAN_TO_PEAK = 2
MAX_ROOF_PEAK = 7

STAIR_WIDTH = 2

# =============================================================================
# FURNISHING
# =============================================================================

SEATING_TABLE_CHANCE = 0.7
STAGE_TABLE_CHANCE = 0.8
BAR_TABLE_CHANCE = 0.1
