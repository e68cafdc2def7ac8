"""Tavern layout generation.

- Tavern: entry point, runs the full pipeline for one plot
- RoomKind: room categories with their size ranges and lotteries
- RoomGrower: frontier-driven room growth
- Room, Wall, Roof and the detail types: the generated structure
"""

from .growth import PlotTooSmallError, RoomGrower, fit_room
from .namegen import generate_tavern_name
from .roofs import assign_roofs, roof_style_options
from .room_kinds import RoomKind
from .structure import (
    BarDetail,
    Detail,
    FlatBarsRoof,
    FlatRoof,
    FloorRoof,
    GableRoof,
    HipRoof,
    LeanToRoof,
    Roof,
    RoofStyle,
    Room,
    StageDetail,
    Stairs,
    TableDetail,
    Wall,
)
from .tavern import Tavern
from .walls import partition_walls

__all__ = [
    "BarDetail",
    "Detail",
    "FlatBarsRoof",
    "FlatRoof",
    "FloorRoof",
    "GableRoof",
    "HipRoof",
    "LeanToRoof",
    "PlotTooSmallError",
    "Roof",
    "RoofStyle",
    "Room",
    "RoomGrower",
    "RoomKind",
    "StageDetail",
    "Stairs",
    "TableDetail",
    "Tavern",
    "Wall",
    "assign_roofs",
    "fit_room",
    "generate_tavern_name",
    "partition_walls",
    "roof_style_options",
]
