"""A console whose reads and writes complete before returning."""

from __future__ import annotations

import os
import sys
import threading
from typing import BinaryIO, Union

END_OF_LINE = b"\n"
END_OF_STREAM = b"\x01"

Source = Union[str, "os.PathLike[str]", BinaryIO, None]


class SynchConsole:
    """Line-oriented console over a pair of byte streams.

    ``infile`` and ``outfile`` may each be a path, an open binary file, or
    None for standard input and output.  Files opened from paths are closed
    by :meth:`close`.  One reader and one writer are served at a time.
    """

    def __init__(self, infile: Source = None, outfile: Source = None) -> None:
        self._owned: list[BinaryIO] = []
        self._input = self._open(infile, "rb", sys.stdin)
        self._output = self._open(outfile, "wb", sys.stdout)
        self._read_lock = threading.Lock()
        self._write_lock = threading.Lock()

    def _open(self, target: Source, mode: str, standard) -> BinaryIO:
        if target is None:
            return standard.buffer
        if isinstance(target, (str, os.PathLike)):
            stream = open(target, mode)
            self._owned.append(stream)
            return stream
        return target

    def read(self, num_bytes: int) -> bytes | None:
        """Read one line of at most ``num_bytes`` bytes.

        A newline or Ctrl-A ends the line and is not returned; Ctrl-A marks
        the end of the stream, and then None is returned.  Raises EOFError
        if the input is exhausted before any byte is read.
        """
        line = bytearray()
        terminator = b""
        with self._read_lock:
            while len(line) < num_bytes:
                ch = self._input.read(1)
                if not ch:
                    if not line:
                        raise EOFError("console input is exhausted")
                    break
                if ch in (END_OF_LINE, END_OF_STREAM):
                    terminator = ch
                    break
                line += ch
        if terminator == END_OF_STREAM:
            return None
        return bytes(line)

    def write(self, data: bytes | str) -> int:
        """Write ``data`` to the output and return how many bytes went out."""
        if isinstance(data, str):
            data = data.encode()
        with self._write_lock:
            self._output.write(data)
            self._output.flush()
        return len(data)

    def close(self) -> None:
        """Close the files this console opened itself."""
        while self._owned:
            self._owned.pop().close()

    def __enter__(self) -> SynchConsole:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()