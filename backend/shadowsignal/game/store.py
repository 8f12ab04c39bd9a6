from __future__ import annotations

from typing import Generic, TypeVar

from .models import Player, Room


T = TypeVar("T")


class KeyedStore(Generic[T]):
    """Plain in-memory key/value store.

    Holds no locks of its own: the session coordinator is the only writer and
    serializes access.
    """

    def __init__(self) -> None:
        self._items: dict[str, T] = {}

    def get(self, key: str) -> T | None:
        return self._items.get(key)

    def put(self, key: str, value: T) -> None:
        self._items[key] = value

    def remove(self, key: str) -> T | None:
        return self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class RoomRegistry(KeyedStore[Room]):
    pass


class PlayerIndex(KeyedStore[Player]):
    pass
