"""A small instructional kernel: threads, scheduling, synchronisation, a console and system calls."""

__version__ = "0.1.0"