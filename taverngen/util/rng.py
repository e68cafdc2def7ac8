"""Seeded random streams, one per named domain.

A single master seed fans out into independent ``Random`` instances, one for
each domain name. Tavern layouts draw from ``"site.tavern"`` and sign names
from ``"site.tavern.name"``, so generating a name never shifts a layout.

    rng.init(config.RANDOM_SEED)
    tavern = Tavern.generate(terrain, site, None, door_tile, door_dir, tiles)

Generators only depend on ``RandomSource``; a plain ``random.Random`` works
wherever a stream does.
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from taverngen.types import RandomSeed

T = TypeVar("T")


class RandomSource(Protocol):
    """The part of the ``random.Random`` interface the generators rely on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...

    def getrandbits(self, k: int) -> int: ...


def gen_bool(source: RandomSource, p: float) -> bool:
    """Return True with probability ``p``."""
    return source.random() < p


def domain_seed(master_seed: RandomSeed, domain: str) -> int:
    """Seed of ``domain`` under ``master_seed``, identical in every process."""
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class RNGStream:
    """Handle on one domain of an ``RNGProvider``.

    The handle looks its ``Random`` up on every call, so a module may keep it
    for good: after the provider is reseeded it draws from the new sequence.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self.domain = domain

    def _current(self) -> Random:
        return self._provider._random_for(self.domain)

    def random(self) -> float:
        return self._current().random()

    def randint(self, a: int, b: int) -> int:
        return self._current().randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return self._current().choice(seq)

    def getrandbits(self, k: int) -> int:
        return self._current().getrandbits(k)


class RNGProvider:
    """Owns the per-domain ``Random`` instances of one master seed.

    With a ``None`` master seed every domain is seeded from system entropy.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._randoms: dict[str, Random] = {}
        self._handles: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Return the (shared) stream handle for ``domain``."""
        handle = self._handles.get(domain)
        if handle is None:
            handle = self._handles[domain] = RNGStream(self, domain)
        return handle

    def _random_for(self, domain: str) -> Random:
        rand = self._randoms.get(domain)
        if rand is None:
            if self._master_seed is None:
                rand = Random()
            else:
                rand = Random(domain_seed(self._master_seed, domain))
            self._randoms[domain] = rand
        return rand

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reseed every domain from ``master_seed``; handles stay valid."""
        self._master_seed = master_seed
        self._randoms.clear()


# =============================================================================
# Process-wide provider
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Seed the process-wide provider, reseeding it if it already exists."""
    global _provider
    if _provider is None:
        _provider = RNGProvider(master_seed)
    else:
        _provider.reset(master_seed)


def get(domain: str) -> RNGStream:
    """Stream for ``domain`` from the process-wide provider.

    An uninitialised provider is created unseeded; call ``init`` first for
    reproducible output.
    """
    global _provider
    if _provider is None:
        _provider = RNGProvider(None)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Reseed the process-wide provider.

    Raises:
        RuntimeError: If ``init`` has not been called.
    """
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
