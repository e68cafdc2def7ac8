"""Plot generators for taverngen.

Each generator turns a plot of site tiles into a frozen building layout:
- Tavern: rooms grown from the front door, walls, roofs and furnishing
"""

from .tavern import PlotTooSmallError, Tavern

__all__ = [
    "PlotTooSmallError",
    "Tavern",
]
