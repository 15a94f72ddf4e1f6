"""The ready queue and the dispatcher that hands the CPU between threads."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from .itemlist import ItemList
from .thread import DeadlockError, ThreadStatus
from .utility import Debugger

if TYPE_CHECKING:
    from .thread import Thread


class Scheduler:
    """Keeps the FIFO list of ready threads and dispatches them one at a time.

    Each kernel thread is carried by a host thread, but only the thread in
    ``current_thread`` ever executes; every other one waits for its turn.
    When the system runs out of threads to run, the scheduler halts and
    wakes every waiting thread so that none is left blocked forever.
    """

    def __init__(self, debugger: Debugger | None = None) -> None:
        self.debugger = debugger if debugger is not None else Debugger()
        self.ready_list = ItemList()
        self.current_thread: Thread | None = None
        self.thread_to_be_destroyed: Thread | None = None
        self.halted = False
        self.failure: BaseException | None = None
        self._cv = threading.Condition()

    def ready_to_run(self, thread: Thread) -> None:
        """Mark ``thread`` ready and put it at the end of the ready list."""
        self.debugger.log("t", f"Putting thread {thread.name} on ready list.\n")
        thread.status = ThreadStatus.READY
        self.ready_list.append(thread)

    def find_next_to_run(self) -> Thread | None:
        """Take the next ready thread off the list, or return None."""
        return self.ready_list.remove()

    def run(self, next_thread: Thread) -> None:
        """Give the CPU to ``next_thread``.

        The running thread must already have been marked ready or blocked.
        This returns once the old thread is scheduled again.
        """
        old_thread = self.current_thread
        if old_thread is None:
            raise RuntimeError("no thread is running")
        self.debugger.log(
            "t",
            f'Switching from thread "{old_thread.name}" to thread "{next_thread.name}"\n',
        )
        if not self._switch(old_thread, next_thread):
            return
        self._after_switch()

    def dump(self) -> str:
        """Return the contents of the ready list as text."""
        names = "".join(f"{thread.name}, " for thread in self.ready_list)
        return f"Ready list contents:\n{names}"

    def _switch(self, old_thread: Thread, new_thread: Thread) -> bool:
        with self._cv:
            self.current_thread = new_thread
            new_thread.status = ThreadStatus.RUNNING
            self._cv.notify_all()
            if old_thread.finishing and old_thread.forked:
                return False
            return self._wait_turn(old_thread)

    def _wait_turn(self, thread: Thread) -> bool:
        """Block until ``thread`` holds the CPU.

        Returns False if the system halted while ``thread`` was finishing;
        raises if it halted on a failure or with ``thread`` still blocked.
        """
        with self._cv:
            while self.current_thread is not thread:
                if self.halted:
                    if self.failure is not None:
                        raise self.failure
                    if thread.finishing:
                        return False
                    raise DeadlockError(
                        f'thread "{thread.name}" is blocked and no thread is left to wake it'
                    )
                self._cv.wait()
            return True

    def _after_switch(self) -> None:
        current = self.current_thread
        if current is not None:
            self.debugger.log("t", f'Now in thread "{current.name}"\n')
        doomed = self.thread_to_be_destroyed
        if doomed is not None:
            self.thread_to_be_destroyed = None
            doomed._destroy()

    def _halt(self, failure: BaseException | None = None) -> None:
        with self._cv:
            self.halted = True
            if self.failure is None:
                self.failure = failure
            self._cv.notify_all()