"""System call codes and the kernel entry point for user-program traps."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Callable, Protocol, TextIO

from .utility import debug

RESULT_REG = 2
ARG1_REG = 4
ARG2_REG = 5
PC_REG = 34
NEXT_PC_REG = 35
PREV_PC_REG = 36

INSTRUCTION_SIZE = 4
MAX_INT_LEN = 11
MAX_STRING_LEN = 256
MAX_CHAR_LINE = 255


class SyscallCode(IntEnum):
    """The codes a user program places in register 2 to request a service."""

    HALT = 0
    EXIT = 1
    EXEC = 2
    JOIN = 3
    CREATE = 4
    OPEN = 5
    READ = 6
    WRITE = 7
    CLOSE = 8
    FORK = 9
    YIELD = 10
    READ_INT = 11
    PRINT_INT = 12
    READ_CHAR = 13
    PRINT_CHAR = 14
    READ_STRING = 15
    PRINT_STRING = 16


class ExceptionType(IntEnum):
    """The reasons a user program can trap into the kernel."""

    NO_EXCEPTION = 0
    SYSCALL = 1
    PAGE_FAULT = 2
    READ_ONLY = 3
    BUS_ERROR = 4
    ADDRESS_ERROR = 5
    OVERFLOW = 6
    ILLEGAL_INSTR = 7
    NUM_EXCEPTION_TYPES = 8


class MachineHalted(Exception):
    """The simulated machine was halted, by request or by a fatal exception."""


class Machine(Protocol):
    """The registers and memory of the simulated processor."""

    def read_register(self, num: int) -> int: ...

    def write_register(self, num: int, value: int) -> None: ...

    def read_mem(self, addr: int, size: int) -> int: ...

    def write_mem(self, addr: int, size: int, value: int) -> None: ...


class Console(Protocol):
    """A line-oriented console such as :class:`~nachokern.synchcons.SynchConsole`."""

    def read(self, num_bytes: int) -> bytes | None: ...

    def write(self, data: bytes | str) -> int: ...


_FAULT_LABELS = {
    ExceptionType.PAGE_FAULT: "Page Fault Exc",
    ExceptionType.READ_ONLY: "Read Only Exc",
    ExceptionType.BUS_ERROR: "Bus Error Exc",
    ExceptionType.ADDRESS_ERROR: "Address Error Exc",
    ExceptionType.OVERFLOW: "Overflow Exc",
    ExceptionType.ILLEGAL_INSTR: "Illegal Instruction Exc",
    ExceptionType.NUM_EXCEPTION_TYPES: "Num Exc",
}

HALT_MESSAGE = "\n[Noti] Halt, initiated by user program.\n"
NOT_AN_INTEGER = "[Error] This is not an integer\n"
TOO_MANY_CHARS = "Only one character may be entered!"
EMPTY_CHAR = "Empty character!"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _signed_byte(value: int) -> int:
    return value - 256 if value >= 128 else value


class ExceptionHandler:
    """Services traps from a user program running on ``machine``.

    System call arguments come in registers 4 and 5 and results go back in
    register 2.  Console traffic goes through ``console``; kernel notices
    go to ``out`` (standard output when None).  Halting the machine raises
    :class:`MachineHalted`.
    """

    def __init__(self, machine: Machine, console: Console, out: TextIO | None = None) -> None:
        self.machine = machine
        self.console = console
        self.out = out
        self._syscalls: dict[SyscallCode, Callable[[], None]] = {
            SyscallCode.READ_INT: self.read_int,
            SyscallCode.PRINT_INT: self.print_int,
            SyscallCode.READ_CHAR: self.read_char,
            SyscallCode.PRINT_CHAR: self.print_char,
            SyscallCode.READ_STRING: self.read_string,
            SyscallCode.PRINT_STRING: self.print_string,
        }

    def _notice(self, message: str) -> None:
        stream = self.out if self.out is not None else sys.stdout
        stream.write(message)
        stream.flush()

    def _read_console(self, num_bytes: int) -> bytes | None:
        try:
            return self.console.read(num_bytes)
        except EOFError:
            return b""

    def _read_byte(self) -> bytes:
        data = self._read_console(1)
        return data[:1] if data else b""

    def handle(self, which: ExceptionType | int) -> None:
        """Deal with one trap of kind ``which``."""
        which = ExceptionType(which)
        if which is ExceptionType.NO_EXCEPTION:
            return
        if which is not ExceptionType.SYSCALL:
            message = f"[{_FAULT_LABELS[which]}] No valid translation found Error.\n"
            debug("a", message)
            self._notice(message)
            raise MachineHalted(message.strip())

        code = self.machine.read_register(RESULT_REG)
        if code == SyscallCode.HALT:
            debug("a", "Shutdown, initiated by user program.\n")
            self._notice(HALT_MESSAGE)
            raise MachineHalted("halt requested by user program")
        try:
            service = self._syscalls.get(SyscallCode(code))
        except ValueError:
            service = None
        if service is not None:
            service()
        self.increase_pc()

    def increase_pc(self) -> None:
        """Advance the program counters past the trapping instruction."""
        current = self.machine.read_register(PC_REG)
        self.machine.write_register(PREV_PC_REG, current)
        following = self.machine.read_register(NEXT_PC_REG)
        self.machine.write_register(PC_REG, following)
        self.machine.write_register(NEXT_PC_REG, following + INSTRUCTION_SIZE)

    def user_to_system(self, virt_addr: int, limit: int) -> bytes:
        """Copy a NUL-terminated string of at most ``limit`` bytes out of user memory."""
        copied = bytearray()
        for offset in range(limit):
            byte = self.machine.read_mem(virt_addr + offset, 1) & 0xFF
            if byte == 0:
                break
            copied.append(byte)
        return bytes(copied)

    def system_to_user(self, virt_addr: int, data: bytes) -> int:
        """Copy ``data`` into user memory, stopping after a NUL byte.

        Returns the number of bytes written.
        """
        written = 0
        for byte in data:
            self.machine.write_mem(virt_addr + written, 1, byte)
            written += 1
            if byte == 0:
                break
        return written

    def read_int(self) -> None:
        """Read a decimal integer from the console into register 2."""
        chars: list[bytes] = []
        invalid = False
        for position in range(MAX_INT_LEN):
            ch = self._read_byte()
            if ch.isdigit() or (position == 0 and ch == b"-"):
                chars.append(ch)
            elif ch:
                invalid = True
            else:
                break
        if invalid:
            self._notice(NOT_AN_INTEGER)
            self.machine.write_register(RESULT_REG, 0)
            return
        text = b"".join(chars)
        negative = text.startswith(b"-")
        digits = text[1:] if negative else text
        value = int(digits) if digits else 0
        self.machine.write_register(RESULT_REG, _to_int32(-value if negative else value))

    def print_int(self) -> None:
        """Write the integer in register 4 to the console in decimal."""
        number = _to_int32(self.machine.read_register(ARG1_REG))
        self.console.write(str(number).encode())
        self.machine.write_register(RESULT_REG, 0)

    def read_char(self) -> None:
        """Read a line holding exactly one character into register 2."""
        data = self._read_console(MAX_CHAR_LINE)
        if data is None:
            self.machine.write_register(RESULT_REG, 0)
        elif len(data) > 1:
            self._notice(TOO_MANY_CHARS)
            debug("a", f"\nERROR: {TOO_MANY_CHARS}")
            self.machine.write_register(RESULT_REG, 0)
        elif not data:
            self._notice(EMPTY_CHAR)
            debug("a", f"\nERROR: {EMPTY_CHAR}")
            self.machine.write_register(RESULT_REG, 0)
        else:
            self.machine.write_register(RESULT_REG, _signed_byte(data[0]))

    def print_char(self) -> None:
        """Write the low byte of register 4 to the console."""
        byte = self.machine.read_register(ARG1_REG) & 0xFF
        self.console.write(bytes([byte]))
        self.machine.write_register(RESULT_REG, 0)

    def read_string(self) -> None:
        """Read a line into the user buffer at register 4, of size register 5."""
        buffer = self.machine.read_register(ARG1_REG)
        length = self.machine.read_register(ARG2_REG)
        if length > 0:
            data = self._read_console(length - 1) or b""
            text = data.split(b"\0", 1)[0]
            self.system_to_user(buffer, text + b"\0")
        self.machine.write_register(RESULT_REG, 0)

    def print_string(self) -> None:
        """Write the NUL-terminated user string at register 4 to the console."""
        buffer = self.machine.read_register(ARG1_REG)
        text = self.user_to_system(buffer, MAX_STRING_LEN)
        self.console.write(text)
        self.machine.write_register(RESULT_REG, 0)