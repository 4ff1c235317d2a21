"""Error codes and the per-thread "last error" slot."""

from __future__ import annotations

import threading
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes reported by haclog."""

    OK = 0
    UNKNOWN = 1
    ALLOC_MEM = 2
    PRINTF_SPEC_LENGTH = 3
    PRINTF_TYPE = 4
    SYS_CALL = 5
    ARGUMENTS = 6
    INTERRUPT = 7

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorCode.OK: "no error",
    ErrorCode.UNKNOWN: "unknown error",
    ErrorCode.ALLOC_MEM: "failed allocated memory space",
    ErrorCode.PRINTF_SPEC_LENGTH: "invalid length in format specifier",
    ErrorCode.PRINTF_TYPE: "unrecognized format specifier",
    ErrorCode.SYS_CALL: "error system call",
    ErrorCode.ARGUMENTS: "invalid arguments",
    ErrorCode.INTERRUPT: "signal interrupt",
}


class HaclogError(Exception):
    """Raised when a haclog operation fails; carries an :class:`ErrorCode`."""

    def __init__(self, code: ErrorCode | int, message: str | None = None):
        self.code = ErrorCode(code)
        super().__init__(message or self.code.description)


_state = threading.local()


def last_error() -> ErrorCode:
    """Return the last error recorded in the calling thread."""
    return getattr(_state, "err", ErrorCode.OK)


def set_error(err: ErrorCode | int) -> None:
    """Record an error code for the calling thread."""
    _state.err = ErrorCode(err)