"""A queue of arbitrary items that can also be kept ordered by key."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from .utility import debug


@dataclass
class _Entry:
    item: Any
    key: int = 0


class ItemList:
    """An ordered collection of items, each carrying an integer sort key.

    Plain ``append`` and ``prepend`` give items a key of 0.  The sorted
    operations keep items in increasing key order, with items of equal key
    kept in insertion order.  No locking is done here.
    """

    def __init__(self) -> None:
        self._entries: deque[_Entry] = deque()

    def append(self, item: Any) -> None:
        """Put ``item`` at the end of the list."""
        self._entries.append(_Entry(item))

    def prepend(self, item: Any) -> None:
        """Put ``item`` at the front of the list."""
        self._entries.appendleft(_Entry(item))

    def remove(self) -> Any:
        """Take the first item off the list; return None if it is empty."""
        removed = self.sorted_remove()
        return None if removed is None else removed[0]

    def sorted_insert(self, item: Any, sort_key: int) -> None:
        """Insert ``item`` before the first entry whose key exceeds ``sort_key``."""
        entry = _Entry(item, sort_key)
        for position, existing in enumerate(self._entries):
            if sort_key < existing.key:
                self._entries.insert(position, entry)
                return
        self._entries.append(entry)

    def sorted_remove(self) -> tuple[Any, int] | None:
        """Take the first entry off the list as ``(item, key)``, or None if empty."""
        if not self._entries:
            return None
        entry = self._entries.popleft()
        return entry.item, entry.key

    def mapcar(self, func: Callable[[Any], Any]) -> None:
        """Call ``func`` on every item, front to back."""
        for item in list(self):
            debug("l", f"In mapcar, about to invoke {func!r}({item!r})\n")
            func(item)

    def is_empty(self) -> bool:
        """Return True if the list holds no items."""
        return not self._entries

    def __iter__(self) -> Iterator[Any]:
        return (entry.item for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)