"""Boot-time set-up and shut-down of the kernel's global state."""

from __future__ import annotations

import random
import re
import sys
from collections import deque
from typing import Iterable, TextIO

from .scheduler import Scheduler
from .synchcons import SynchConsole
from .thread import Thread, ThreadStatus
from .utility import ALL_FLAGS, Debugger, debug_init

CLEANUP_MESSAGE = "\nCleaning up...\n"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Parse a leading decimal integer the lenient way; 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class Kernel:
    """The kernel's global data: debugger, scheduler and the running thread.

    The thread that builds the kernel becomes the "main" kernel thread and
    is marked running.  ``random_seed`` switches on random yielding and
    seeds the kernel's random number generator.  Kernel output goes to
    ``out``, or to standard output when it is None.
    """

    def __init__(
        self,
        debug_flags: str | None = None,
        random_seed: int | None = None,
        out: TextIO | None = None,
    ) -> None:
        flags = debug_flags if debug_flags is not None else ""
        self.out = out
        debug_init(flags)
        self.debugger = Debugger(flags, out)
        self.random_seed = random_seed
        self.random_yield = random_seed is not None
        self.rng = random.Random(random_seed)
        self.scheduler = Scheduler(self.debugger)
        self.main_thread = Thread("main", self.scheduler)
        self.main_thread.status = ThreadStatus.RUNNING
        self.scheduler.current_thread = self.main_thread
        self.cleaned_up = False
        self._console: SynchConsole | None = None

    @property
    def current_thread(self) -> Thread | None:
        """The kernel thread that holds the CPU."""
        return self.scheduler.current_thread

    @property
    def console(self) -> SynchConsole:
        """The console on standard input and output, opened on first use."""
        if self._console is None:
            self._console = SynchConsole()
        return self._console

    def cleanup(self) -> None:
        """Shut the kernel down and release what it holds."""
        if self.cleaned_up:
            return
        self.cleaned_up = True
        stream = self.out if self.out is not None else sys.stdout
        stream.write(CLEANUP_MESSAGE)
        stream.flush()
        if self._console is not None:
            self._console.close()
            self._console = None
        self.scheduler._halt()


def initialize(argv: Iterable[str] | None = None, out: TextIO | None = None) -> Kernel:
    """Build a kernel from command-line arguments (without the program name).

    ``-d [flags]`` enables debug messages (all of them when no flags
    follow); ``-rs <seed>`` turns on random yielding with a repeatable
    seed.  Other arguments are left for the caller.
    """
    args = deque(argv or ())
    debug_flags = ""
    random_seed: int | None = None
    while args:
        arg = args.popleft()
        if arg == "-d":
            debug_flags = args.popleft() if args else ALL_FLAGS
        elif arg == "-rs":
            if not args:
                raise ValueError("-rs needs a random seed")
            random_seed = _atoi(args.popleft())
    return Kernel(debug_flags, random_seed, out)