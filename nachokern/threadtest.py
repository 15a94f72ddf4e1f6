"""A simple test of threads handing the CPU back and forth."""

from __future__ import annotations

import sys
from typing import TextIO

from .system import Kernel
from .thread import Thread

LOOPS = 5


def _stream(kernel: Kernel) -> TextIO:
    return kernel.out if kernel.out is not None else sys.stdout


def simple_thread(kernel: Kernel, which: int) -> None:
    """Loop five times, yielding the CPU after each line printed."""
    stream = _stream(kernel)
    for num in range(LOOPS):
        stream.write(f"*** thread {which} looped {num} times\n")
        stream.flush()
        current = kernel.current_thread
        if current is None:
            raise RuntimeError("no thread is running")
        current.yield_()


def thread_test1(kernel: Kernel) -> None:
    """Ping-pong between a forked thread and the calling one."""
    kernel.debugger.log("t", "Entering ThreadTest1")
    forked = Thread("forked thread", kernel.scheduler)
    forked.fork(lambda which: simple_thread(kernel, which), 1)
    simple_thread(kernel, 0)


def thread_test(kernel: Kernel, testnum: int = 1) -> None:
    """Run the thread test numbered ``testnum``."""
    if testnum == 1:
        thread_test1(kernel)
    else:
        stream = _stream(kernel)
        stream.write("No test specified.\n")
        stream.flush()