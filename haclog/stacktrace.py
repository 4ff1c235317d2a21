"""Stack trace output and the fatal debug break."""

from __future__ import annotations

import os
import sys
import traceback
from typing import TextIO

from haclog.sync import nsleep

MAX_STACKTRACE_FRAME_NUM = 256


def print_stacktrace(stream: TextIO | None = None) -> None:
    """Write the caller's stack, innermost frame first, to ``stream`` (stdout by default)."""
    out = sys.stdout if stream is None else stream
    frames = traceback.extract_stack()[:-1]
    frames.reverse()
    for index, frame in enumerate(frames[:MAX_STACKTRACE_FRAME_NUM]):
        out.write(f"#{index} {frame.filename}:{frame.lineno} in {frame.name}\n")
    out.flush()


def debug_break() -> None:
    """In debug mode, print the stack and abort the process; otherwise do nothing."""
    if __debug__:
        nsleep(5 * 1000 * 1000)
        print_stacktrace()
        os.abort()