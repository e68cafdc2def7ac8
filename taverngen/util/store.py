"""Arena storage with typed ids.

Entities that refer to each other (rooms, walls, roofs) live in one ``Store``
per type and hold ``Id`` values instead of object references. Ids are only
meaningful for the store that issued them.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True, order=True)
class Id(Generic[T]):
    """Opaque index into a ``Store``."""

    idx: int

    def __repr__(self) -> str:
        return f"Id({self.idx})"


class StoreFrozenError(Exception):
    """Raised when inserting into a store after generation has finished."""

    pass


class Store(Generic[T]):
    """Append-only collection addressed by ``Id``. Iterates in insertion order."""

    def __init__(self) -> None:
        self._items: list[T] = []
        self._frozen = False

    def insert(self, value: T) -> Id[T]:
        if self._frozen:
            raise StoreFrozenError("Store is frozen; no more entities can be added")
        self._items.append(value)
        return Id(len(self._items) - 1)

    def __getitem__(self, id: Id[T]) -> T:
        return self._items[id.idx]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def ids(self) -> list[Id[T]]:
        return [Id(i) for i in range(len(self._items))]

    def values(self) -> list[T]:
        return list(self._items)

    def items(self) -> list[tuple[Id[T], T]]:
        return [(Id(i), item) for i, item in enumerate(self._items)]

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen
