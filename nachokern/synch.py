"""Synchronisation primitives for kernel threads: semaphores, locks, conditions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .itemlist import ItemList

if TYPE_CHECKING:
    from .scheduler import Scheduler


class Semaphore:
    """A counting semaphore whose value never drops below zero.

    ``p`` waits until the value is positive and then decrements it; ``v``
    increments it and makes the longest-waiting thread ready to run.  The
    value cannot be read from outside, since it could change at any moment.
    """

    def __init__(self, name: str, initial_value: int, scheduler: Scheduler) -> None:
        if initial_value < 0:
            raise ValueError(f"semaphore value must not be negative: {initial_value}")
        self.name = name
        self._value = initial_value
        self._scheduler = scheduler
        self._queue = ItemList()

    def __repr__(self) -> str:
        return f"Semaphore({self.name!r})"

    def p(self) -> None:
        """Wait until the value is positive, then take one from it."""
        while self._value == 0:
            current = self._scheduler.current_thread
            if current is None:
                raise RuntimeError("no thread is running")
            self._queue.append(current)
            current.sleep()
        self._value -= 1

    def v(self) -> None:
        """Add one to the value, waking the first waiting thread if any."""
        thread = self._queue.remove()
        if thread is not None:
            self._scheduler.ready_to_run(thread)
        self._value += 1


class Lock:
    """A lock that is either busy or free.

    Acquiring and releasing never block: on the single simulated CPU the
    running thread keeps it until it gives the CPU up.  The lock records
    whether it is held, and can be used as a context manager.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.held = False

    def __repr__(self) -> str:
        return f"Lock({self.name!r}, held={self.held})"

    def acquire(self) -> None:
        """Mark the lock busy."""
        self.held = True

    def release(self) -> None:
        """Mark the lock free."""
        self.held = False

    def __enter__(self) -> Lock:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class Condition:
    """A Mesa-style condition variable used under a :class:`Lock`.

    Since locks here never block, no thread can be parked on a condition:
    waiting is an error, so the queue of waiters always stays empty and
    signalling finds nobody to wake.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._waiters = ItemList()

    def __repr__(self) -> str:
        return f"Condition({self.name!r})"

    def wait(self, condition_lock: Lock) -> None:
        """Refuse to block; a wait here could never be woken."""
        raise RuntimeError(
            f'cannot wait on condition "{self.name}" under lock "{condition_lock.name}": '
            "no thread could ever signal it"
        )

    def signal(self, condition_lock: Lock) -> Any:
        """Take the first waiter off the queue and return it, or None if none waits."""
        return self._waiters.remove()

    def broadcast(self, condition_lock: Lock) -> list[Any]:
        """Take every waiter off the queue and return them in order."""
        woken = []
        while not self._waiters.is_empty():
            woken.append(self._waiters.remove())
        return woken