"""A list whose operations are made mutually exclusive by a lock."""

from __future__ import annotations

from typing import Any, Callable

from .itemlist import ItemList
from .synch import Condition, Lock


class SynchList:
    """A FIFO list guarded by a lock, monitor style.

    Removing from an empty list would have to wait on a condition, which
    this kernel cannot do, so it raises instead.
    """

    def __init__(self) -> None:
        self._list = ItemList()
        self._lock = Lock("list lock")
        self._list_empty = Condition("list empty cond")

    def append(self, item: Any) -> None:
        """Put ``item`` at the end and wake anyone waiting to remove."""
        with self._lock:
            self._list.append(item)
            self._list_empty.signal(self._lock)

    def remove(self) -> Any:
        """Take the first item off the list, waiting while it is empty."""
        with self._lock:
            while self._list.is_empty():
                self._list_empty.wait(self._lock)
            return self._list.remove()

    def mapcar(self, func: Callable[[Any], Any]) -> None:
        """Call ``func`` on every item while holding the lock."""
        with self._lock:
            self._list.mapcar(func)