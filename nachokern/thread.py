"""Kernel threads that take turns on a single simulated CPU."""

from __future__ import annotations

import threading
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .scheduler import Scheduler


class ThreadStatus(Enum):
    """The life-cycle states of a kernel thread."""

    JUST_CREATED = auto()
    RUNNING = auto()
    READY = auto()
    BLOCKED = auto()


class DeadlockError(RuntimeError):
    """A thread blocked while no other thread was ready to run."""


class Thread:
    """A thread control block.

    A thread is created first and started later with :meth:`fork`.  The
    thread that boots the system is not forked: it is made current by
    setting its status to RUNNING and storing it as the scheduler's
    ``current_thread``, and it runs on the caller's own stack.
    """

    def __init__(self, name: str, scheduler: Scheduler) -> None:
        self.name = name
        self.scheduler = scheduler
        self.status = ThreadStatus.JUST_CREATED
        self.forked = False
        self.finishing = False
        self.error: BaseException | None = None
        self._done = threading.Event()
        self._host: threading.Thread | None = None

    def __repr__(self) -> str:
        return f"Thread({self.name!r}, {self.status.name})"

    def _log(self, message: str) -> None:
        self.scheduler.debugger.log("t", message)

    def _require_current(self) -> None:
        if self is not self.scheduler.current_thread:
            raise RuntimeError(f'thread "{self.name}" is not the running thread')

    def fork(self, func: Callable[[Any], Any], arg: Any = None) -> None:
        """Arrange for ``func(arg)`` to run in this thread, and make it ready."""
        if self.forked:
            raise RuntimeError(f'thread "{self.name}" has already been forked')
        self._log(f'Forking thread "{self.name}" with func = {func!r}, arg = {arg!r}\n')
        self.forked = True
        self._host = threading.Thread(
            target=self._root, args=(func, arg), name=self.name, daemon=True
        )
        self._host.start()
        self.scheduler.ready_to_run(self)

    def yield_(self) -> None:
        """Give up the CPU if another thread is ready, rejoining the ready list."""
        self._require_current()
        self._log(f'Yielding thread "{self.name}"\n')
        next_thread = self.scheduler.find_next_to_run()
        if next_thread is not None:
            self.scheduler.ready_to_run(self)
            self.scheduler.run(next_thread)

    def sleep(self) -> None:
        """Block this thread and give the CPU to the next ready thread.

        Someone else must put the thread back on the ready list.  If no
        thread is ready the system halts: normally when this thread is
        finishing, otherwise with a :class:`DeadlockError`.
        """
        self._require_current()
        self._log(f'Sleeping thread "{self.name}"\n')
        self.status = ThreadStatus.BLOCKED
        next_thread = self.scheduler.find_next_to_run()
        if next_thread is None:
            if self.finishing:
                self.scheduler._halt()
                self.scheduler.thread_to_be_destroyed = None
                self._done.set()
                return
            error = DeadlockError(
                f'thread "{self.name}" is blocked and no thread is ready to run'
            )
            self.scheduler._halt(error)
            raise error
        self.scheduler.run(next_thread)

    def finish(self) -> None:
        """End this thread; it is torn down once another thread runs."""
        self._require_current()
        self._log(f'Finishing thread "{self.name}"\n')
        self.finishing = True
        self.scheduler.thread_to_be_destroyed = self
        self.sleep()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for this thread to be finished; return True if it was."""
        return self._done.wait(timeout)

    def _destroy(self) -> None:
        self._log(f'Deleting thread "{self.name}"\n')
        if self is self.scheduler.current_thread:
            raise RuntimeError(f'thread "{self.name}" cannot delete itself while running')
        self._done.set()

    def _root(self, func: Callable[[Any], Any], arg: Any) -> None:
        try:
            self.scheduler._wait_turn(self)
            self.scheduler._after_switch()
            func(arg)
            self.finish()
        except Exception as exc:
            self.error = exc
            if not self.scheduler.halted:
                self.scheduler._halt(exc)
            self._done.set()