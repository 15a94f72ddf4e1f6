"""Debug message control and small integer helpers."""

from __future__ import annotations

import sys
from typing import TextIO

ALL_FLAGS = "+"


class Debugger:
    """Prints debug messages whose flag character is enabled.

    ``flags`` is a string of enabled flag characters; ``"+"`` enables all
    of them, and ``None`` disables every message.  When ``stream`` is
    ``None`` messages go to whatever ``sys.stdout`` is at the time.
    """

    def __init__(self, flags: str | None = None, stream: TextIO | None = None) -> None:
        self.flags = flags
        self.stream = stream

    def is_enabled(self, flag: str) -> bool:
        """Return True if messages tagged with ``flag`` are printed."""
        if self.flags is None:
            return False
        return flag in self.flags or ALL_FLAGS in self.flags

    def log(self, flag: str, message: str) -> None:
        """Write ``message`` if ``flag`` is enabled."""
        if not self.is_enabled(flag):
            return
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(message)
        stream.flush()


_default = Debugger()


def debug_init(flags: str | None) -> None:
    """Enable only the debug messages whose flag is in ``flags``."""
    _default.flags = flags


def debug_is_enabled(flag: str) -> bool:
    """Return True if the process-wide debugger prints ``flag`` messages."""
    return _default.is_enabled(flag)


def debug(flag: str, message: str) -> None:
    """Print ``message`` through the process-wide debugger."""
    _default.log(flag, message)


def div_round_down(n: int, s: int) -> int:
    """Divide ``n`` by ``s``, rounding down."""
    return n // s


def div_round_up(n: int, s: int) -> int:
    """Divide ``n`` by ``s``, rounding up."""
    quotient, remainder = divmod(n, s)
    return quotient + (1 if remainder > 0 else 0)