"""Observable page-session stores shared by every component on the page."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

Listener = Callable[[str, V], None]


class ObservableStore(Generic[V]):
    """Values keyed by id with per-key change listeners.

    Created empty when the page session starts and filled lazily. Every
    subscriber of a key is told about changes, including subscribers that
    registered before the write. A failing listener is logged and does not
    stop the others.
    """

    def __init__(self):
        self._values: dict[str, V] = {}
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    @staticmethod
    def _key(key: Hashable) -> str:
        return str(key)

    def known(self, key: Hashable) -> bool:
        return self._key(key) in self._values

    def _lookup(self, key: Hashable) -> Optional[V]:
        return self._values.get(self._key(key))

    def _write(self, key: Hashable, value: V) -> None:
        key = self._key(key)
        if key in self._values and self._values[key] == value:
            return
        self._values[key] = value
        for listener in list(self._listeners.get(key, ())):
            try:
                listener(key, value)
            except Exception:
                logger.exception(f"{type(self).__name__} listener for {key} failed")

    def subscribe(self, key: Hashable, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``key``; returns the unsubscribe callable."""
        key = self._key(key)
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if listeners and listener in listeners:
                listeners.remove(listener)
                if not listeners:
                    del self._listeners[key]

        return unsubscribe

    def snapshot(self) -> dict[str, V]:
        return dict(self._values)

    def clear(self) -> None:
        self._values.clear()


class FlagRegistry(ObservableStore[bool]):
    """Yes/no state per id; unknown ids read as False."""

    def get(self, key: Hashable) -> bool:
        return self._lookup(key) or False

    def set(self, key: Hashable, value: bool) -> None:
        self._write(key, bool(value))
