"""
Console output helpers.

Everything the shell says to the user goes to stdout through output(),
so prompts, messages and child output interleave in order.
"""

import sys


def output(text: str, newline: bool = True) -> None:
    """Write a message to stdout and flush it."""
    sys.stdout.write(text + "\n" if newline else text)
    sys.stdout.flush()


def flush_standard_streams() -> None:
    """Flush Python-level buffers before fork() or _exit()."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            # stream already closed
            pass
