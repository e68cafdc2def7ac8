"""Tavern sign names."""

from __future__ import annotations

from taverngen import config
from taverngen.util import rng
from taverngen.util.rng import RandomSource

ADJECTIVES: tuple[str, ...] = (
    "Drunken",
    "Golden",
    "Rusty",
    "Sleeping",
    "Prancing",
    "Crooked",
    "Silver",
    "Laughing",
    "Wandering",
    "Hungry",
    "Jolly",
    "Broken",
    "Red",
    "Howling",
    "Merry",
    "Lonely",
)

NOUNS: tuple[str, ...] = (
    "Dragon",
    "Pony",
    "Anchor",
    "Goblet",
    "Boar",
    "Lantern",
    "Giant",
    "Barrel",
    "Stag",
    "Crown",
    "Fiddler",
    "Kettle",
    "Raven",
    "Wheel",
    "Mermaid",
    "Tankard",
)

# Second noun for "The <Noun> and <Noun>" names
COMPANIONS: tuple[str, ...] = (
    "Hound",
    "Hare",
    "Feather",
    "Fox",
    "Key",
    "Bell",
    "Thistle",
    "Pike",
)


def generate_tavern_name(source: RandomSource | None = None) -> str:
    """Return a name like "The Rusty Anchor" or "The Boar and Thistle".

    Draws from the global name stream when no ``source`` is given.
    """
    if source is None:
        source = rng.get(config.TAVERN_NAME_RNG_DOMAIN)
    noun = source.choice(NOUNS)
    if source.random() < 0.25:
        return f"The {noun} and {source.choice(COMPANIONS)}"
    return f"The {source.choice(ADJECTIVES)} {noun}"
