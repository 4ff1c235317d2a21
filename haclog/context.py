"""Process-wide logging context and the per-thread contexts registered with it."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable

from haclog.bytes_buffer import BytesBuffer
from haclog.errors import ErrorCode, HaclogError
from haclog.sync import SpinLock, nsleep, thread_readable_id

DEFAULT_BYTES_BUF_SIZE = 1024 * 1024
DEFAULT_MSG_BUF_SIZE = 2048
MAX_HANDLERS = 8


class ThreadStatus(IntEnum):
    """Lifecycle of a thread context as seen by the backend."""

    NORMAL = 0
    WAIT_REMOVE = 1
    DONE = 2


@dataclass(eq=False)
class ThreadContext:
    """State owned by one producing thread: its byte ring, id and status."""

    bytes_buf: BytesBuffer
    tid: int
    status: ThreadStatus = ThreadStatus.NORMAL


@dataclass(eq=False)
class Context:
    """Shared state: registered threads, handlers and buffer sizes."""

    level: int | None = None
    msg_buf_size: int = DEFAULT_MSG_BUF_SIZE
    before_run_cb: Callable[[], Any] | None = None
    handlers: list[Any] = field(default_factory=list)
    thread_contexts: list[ThreadContext] = field(default_factory=list)
    _bytes_buf_size: int = DEFAULT_BYTES_BUF_SIZE
    _pending: list[ThreadContext] = field(default_factory=list)
    _spinlock: SpinLock = field(default_factory=SpinLock)

    @property
    def bytes_buf_size(self) -> int:
        """Capacity given to each new thread's byte ring."""
        return self._bytes_buf_size

    @bytes_buf_size.setter
    def bytes_buf_size(self, size: int) -> None:
        self._bytes_buf_size = max(size, DEFAULT_BYTES_BUF_SIZE)

    def insert_thread_context(self, th_ctx: ThreadContext) -> None:
        """Queue ``th_ctx`` to be picked up by the backend."""
        with self._spinlock:
            self._pending.insert(0, th_ctx)

    def remove_thread_context(self, th_ctx: ThreadContext) -> None:
        """Ask the backend to drop ``th_ctx`` and wait until it has done so."""
        th_ctx.status = ThreadStatus.WAIT_REMOVE
        while th_ctx.status != ThreadStatus.DONE:
            nsleep(1 * 1000 * 1000)

    def add_handler(self, handler: Any) -> None:
        """Register ``handler``; the context level becomes the lowest handler level."""
        if len(self.handlers) >= MAX_HANDLERS:
            raise HaclogError(
                ErrorCode.ALLOC_MEM, f"no more than {MAX_HANDLERS} handlers allowed"
            )
        self.handlers.append(handler)
        if self.level is None or handler.level < self.level:
            self.level = handler.level

    def accept_new_threads(self) -> None:
        """Move queued thread contexts into the active list."""
        with self._spinlock:
            while self._pending:
                self.thread_contexts.insert(0, self._pending.pop(0))

    def release_removed_threads(self) -> None:
        """Drop every thread context waiting for removal and mark it done."""
        kept = []
        for th_ctx in self.thread_contexts:
            if th_ctx.status == ThreadStatus.WAIT_REMOVE:
                th_ctx.status = ThreadStatus.DONE
            else:
                kept.append(th_ctx)
        self.thread_contexts[:] = kept


_context = Context()
_local = threading.local()
_auto_init = True


def get_context() -> Context:
    """Return the process-wide context."""
    return _context


def thread_context_init() -> ThreadContext:
    """Create and register the calling thread's context, or return the existing one."""
    existing = getattr(_local, "ctx", None)
    if existing is not None:
        return existing
    ctx = get_context()
    th_ctx = ThreadContext(
        bytes_buf=BytesBuffer(ctx.bytes_buf_size),
        tid=thread_readable_id(),
    )
    ctx.insert_thread_context(th_ctx)
    _local.ctx = th_ctx
    return th_ctx


def thread_context_cleanup() -> None:
    """Wait for the calling thread's buffer to drain, then unregister its context."""
    th_ctx = getattr(_local, "ctx", None)
    if th_ctx is None:
        return
    th_ctx.bytes_buf.join()
    get_context().remove_thread_context(th_ctx)
    th_ctx.tid = 0
    _local.ctx = None


def thread_context_get() -> ThreadContext | None:
    """Return the calling thread's context, creating it when auto init is on."""
    th_ctx = getattr(_local, "ctx", None)
    if th_ctx is None and _auto_init:
        return thread_context_init()
    return th_ctx


def thread_context_set_auto_init(flag: bool) -> None:
    """Enable or disable creating thread contexts on first use."""
    global _auto_init
    _auto_init = bool(flag)