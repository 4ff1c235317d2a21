"""A single-producer, single-consumer ring of bytes with separate read and write positions."""

from __future__ import annotations

from haclog.errors import ErrorCode, HaclogError
from haclog.sync import nsleep

CACHE_LINE_SIZE = 64


class BytesBuffer:
    """Fixed-size byte ring; the writer never comes closer than ``min_interval`` to the reader."""

    def __init__(self, capacity: int, min_interval: int = CACHE_LINE_SIZE) -> None:
        if min_interval < 0 or capacity < 2 * min_interval:
            raise HaclogError(
                ErrorCode.ARGUMENTS,
                f"capacity {capacity} is smaller than twice the interval {min_interval}",
            )
        self.capacity = capacity
        self.min_interval = min_interval
        self.buffer = bytearray(capacity)
        self.w = 0
        self.r = 0

    def find_contiguous(self, num_bytes: int, r: int, w: int) -> int | None:
        """Find where ``num_bytes`` contiguous bytes can be written from ``w``.

        Returns the write position, or None when the reader must move first.
        """
        if num_bytes > self.capacity // 2 - self.min_interval:
            raise HaclogError(
                ErrorCode.ARGUMENTS, f"request of {num_bytes} bytes exceeds the limit"
            )

        if w >= r:
            contiguous = self.capacity - w
            if contiguous > num_bytes:
                return w
            if contiguous < num_bytes:
                if r - self.min_interval < num_bytes:
                    return None
                return 0
            # The write ends exactly at capacity, so the writer wraps to 0
            # and must not land on the reader.
            return None if r == 0 else w

        contiguous = r - w - self.min_interval
        return None if contiguous < num_bytes else w

    def _checked_move(self, pos: int) -> int:
        if pos == self.capacity:
            return 0
        if pos < 0 or pos > self.capacity:
            raise HaclogError(ErrorCode.ARGUMENTS, f"position {pos} out of range")
        return pos

    def w_move(self, pos: int) -> None:
        """Move the writer to ``pos``; ``capacity`` wraps to 0."""
        self.w = self._checked_move(pos)

    def r_move(self, pos: int) -> None:
        """Move the reader to ``pos``; ``capacity`` wraps to 0."""
        self.r = self._checked_move(pos)

    def view(self, pos: int) -> memoryview:
        """Return a writable view of the buffer starting at ``pos``."""
        if pos < 0 or pos >= self.capacity:
            raise HaclogError(ErrorCode.ARGUMENTS, f"position {pos} out of range")
        return memoryview(self.buffer)[pos:]

    def join(self) -> None:
        """Block until the reader has caught up with the writer."""
        while self.r != self.w:
            nsleep(1 * 1000 * 1000)