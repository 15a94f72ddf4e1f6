# nachokern

A small instructional operating-system kernel built from simple, inspectable
parts. Kernel threads take turns on a single simulated CPU: each one is
carried by a host thread, but only the thread the scheduler has made current
ever runs.

## Modules

- `nachokern.utility`: flag-controlled debug output (`Debugger` with
  `is_enabled` and `log`, plus the process-wide `debug_init`,
  `debug_is_enabled` and `debug`) and the rounding helpers `div_round_up` and
  `div_round_down`. A flag string of `"+"` enables every message.
- `nachokern.itemlist`: `ItemList`, a list of items each carrying an integer
  key. `append`, `prepend` and `remove` use it as a queue. `sorted_insert` and
  `sorted_remove` keep it in increasing key order, with equal keys in
  insertion order. `remove` returns `None` when the list is empty.
- `nachokern.bitmap`: `BitMap`, a fixed-size bit allocator with `mark`,
  `clear`, `test`, `find` (sets and returns the first clear bit, or `None` if
  every bit is set), `num_clear` and `format`. `fetch_from` and `write_back`
  load and store the bits as 32-bit little-endian words at the start of a
  binary file. A bit number out of range raises `IndexError`.
- `nachokern.scheduler`: `Scheduler`, a straight FIFO ready list with
  `ready_to_run`, `find_next_to_run`, `run` and `dump`. `dump` returns the
  ready list as text.
- `nachokern.thread`: `Thread` with `fork`, `yield_`, `sleep`, `finish` and
  `join`, and the `ThreadStatus` enum. `DeadlockError` is raised when a
  thread blocks and no other thread is ready to run.
- `nachokern.synch`: `Semaphore` (`p` / `v`), `Lock` and `Condition`. `Lock`
  is also a context manager. Locks never block, because the running thread
  keeps the CPU until it gives it up. For the same reason `Condition.wait`
  raises `RuntimeError`; `signal` and `broadcast` return the waiters they
  took off the queue, which is always empty.
- `nachokern.synchlist`: `SynchList`, a lock-guarded list with `append`,
  `remove` and `mapcar`. Removing from an empty list raises `RuntimeError`,
  since it would have to wait on a condition.
- `nachokern.synchcons`: `SynchConsole`, line-oriented console I/O over a
  path, an open binary file, or standard input/output.
  - `read(n)` returns at most `n` bytes of one line. A newline ends the line.
  - Ctrl-A marks the end of the stream, and `read` then returns `None`.
  - `read` raises `EOFError` if the input is already exhausted.
  - `write` returns the number of bytes written.
  - `close` closes the files the console opened from paths.
- `nachokern.syscalls`: `SyscallCode`, `ExceptionType`, `MachineHalted` and
  `ExceptionHandler`.
  - `handle` serves the integer, character and string console system calls
    (`read_int`, `print_int`, `read_char`, `print_char`, `read_string`,
    `print_string`) and then advances the program counters.
  - The halt call and every fault raise `MachineHalted`.
- `nachokern.system`: `Kernel`, which holds the debugger, scheduler, main
  thread and console, and `initialize`, which builds a `Kernel` from
  command-line flags.
- `nachokern.threadtest`: `simple_thread`, `thread_test1` and `thread_test`,
  the ping-pong thread demonstration.
- `nachokern.cli`: `main`, the `nachokern` command.

## Installation

```
pip install .
```

## Command line

The command boots the kernel, runs a thread test, finishes the main thread and
cleans up:

```
nachokern
nachokern -d t
nachokern -rs 17
nachokern -q 2
```

The flags are:

- `-d <flags>` enables debug messages for the given flag characters. `+`, or
  `-d` with nothing after it, enables all of them.
- `-rs <seed>` records a random seed and turns on the kernel's
  random-yield setting.
- `-q <n>` selects the thread test. Test 1 is the ping-pong between two
  threads. Any other number prints `No test specified.`

## Library use

```python
from nachokern.system import Kernel
from nachokern.threadtest import thread_test

kernel = Kernel()
thread_test(kernel, 1)            # two threads take turns printing "looped" lines
kernel.current_thread.finish()    # let the remaining thread run to its end
kernel.cleanup()
```

```python
from nachokern.bitmap import BitMap

pages = BitMap(8)
first = pages.find()      # 0, now marked as used
print(pages.num_clear())  # 7
```

`ExceptionHandler` needs a machine object that provides these methods:

- `read_register(num)`
- `write_register(num, value)`
- `read_mem(addr, size)`
- `write_mem(addr, size, value)`

It also needs a console such as `SynchConsole`.

## What it does not do

The package has no processor simulator and no file system. It cannot load or
run user programs by itself. You supply the registers and memory that
`ExceptionHandler` works on. Random yielding only records the seed and the
setting: no timer interrupts the running thread.

## Tests

```
pip install .[test]
pytest
```