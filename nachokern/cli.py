"""Command that boots the kernel and runs the thread test."""

from __future__ import annotations

import sys
from collections import deque
from typing import Sequence

from .system import _atoi, initialize
from .threadtest import thread_test


def _select_test(args: Sequence[str]) -> int:
    """Pick the test number: ``-q N`` sets it, any other argument resets it to 1."""
    testnum = 1
    queue = deque(args)
    while queue:
        arg = queue.popleft()
        if arg[1:2] == "q":
            if not queue:
                raise ValueError(f"{arg} needs a test number")
            testnum = _atoi(queue.popleft())
        else:
            testnum = 1
    return testnum


def main(argv: Sequence[str] | None = None) -> int:
    """Boot the kernel, run the selected thread test, then shut down."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        kernel = initialize(args)
        testnum = _select_test(args)
    except ValueError as exc:
        print(f"nachokern: {exc}", file=sys.stderr)
        return 2
    kernel.debugger.log("t", "Entering main")
    thread_test(kernel, testnum)
    current = kernel.current_thread
    if current is not None:
        current.finish()
    kernel.cleanup()
    return 0


if __name__ == "__main__":
    sys.exit(main())