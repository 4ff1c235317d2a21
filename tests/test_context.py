import threading
from types import SimpleNamespace

import pytest

from haclog.bytes_buffer import BytesBuffer
from haclog.context import (
    Context,
    ThreadContext,
    ThreadStatus,
    get_context,
    thread_context_cleanup,
    thread_context_get,
    thread_context_init,
    thread_context_set_auto_init,
)
from haclog.errors import ErrorCode, HaclogError


def _run_in_thread(fn):
    result = {}

    def target():
        try:
            result["value"] = fn()
        except BaseException as exc:
            result["error"] = exc

    th = threading.Thread(target=target)
    th.start()
    th.join(timeout=10)
    if "error" in result:
        raise result["error"]
    return result.get("value")


@pytest.fixture
def backend():
    stop = threading.Event()
    ctx = get_context()

    def loop():
        while not stop.is_set():
            ctx.accept_new_threads()
            ctx.release_removed_threads()
            stop.wait(0.001)

    th = threading.Thread(target=loop, daemon=True)
    th.start()
    yield ctx
    stop.set()
    th.join(timeout=5)
    thread_context_set_auto_init(True)


def _make_thread_ctx():
    return ThreadContext(bytes_buf=BytesBuffer(1024), tid=1)


def test_thread_status_values():
    ctx = Context()
    th_ctx = _make_thread_ctx()
    assert th_ctx.status == 0
    assert th_ctx.status == ThreadStatus.NORMAL
    ctx.insert_thread_context(th_ctx)
    ctx.accept_new_threads()
    th_ctx.status = ThreadStatus(1)
    assert th_ctx.status == ThreadStatus.WAIT_REMOVE
    ctx.release_removed_threads()
    assert th_ctx.status == 2
    assert th_ctx.status == ThreadStatus.DONE


def test_default_sizes():
    ctx = Context()
    assert ctx.bytes_buf_size == 1024 * 1024
    assert ctx.msg_buf_size == 2048


def test_bytes_buf_size_is_clamped_to_minimum():
    ctx = Context()
    ctx.bytes_buf_size = 10
    assert ctx.bytes_buf_size == 1024 * 1024
    ctx.bytes_buf_size = 2 * 1024 * 1024
    assert ctx.bytes_buf_size == 2 * 1024 * 1024


def test_msg_buf_size_is_not_clamped():
    ctx = Context()
    ctx.msg_buf_size = 16
    assert ctx.msg_buf_size == 16


def test_add_handler_tracks_lowest_level():
    ctx = Context()
    ctx.add_handler(SimpleNamespace(level=3))
    assert ctx.level == 3
    ctx.add_handler(SimpleNamespace(level=1))
    assert ctx.level == 1
    ctx.add_handler(SimpleNamespace(level=4))
    assert ctx.level == 1
    assert len(ctx.handlers) == 3


def test_add_handler_limit():
    ctx = Context()
    for _ in range(8):
        ctx.add_handler(SimpleNamespace(level=2))
    with pytest.raises(HaclogError) as info:
        ctx.add_handler(SimpleNamespace(level=2))
    assert info.value.code == ErrorCode.ALLOC_MEM
    assert len(ctx.handlers) == 8


def test_insert_is_visible_after_accept():
    ctx = Context()
    th_ctx = _make_thread_ctx()
    ctx.insert_thread_context(th_ctx)
    assert th_ctx not in ctx.thread_contexts
    ctx.accept_new_threads()
    assert ctx.thread_contexts == [th_ctx]


def test_release_removes_only_waiting_contexts():
    ctx = Context()
    keep = _make_thread_ctx()
    drop = _make_thread_ctx()
    ctx.insert_thread_context(keep)
    ctx.insert_thread_context(drop)
    ctx.accept_new_threads()
    drop.status = ThreadStatus.WAIT_REMOVE
    ctx.release_removed_threads()
    assert ctx.thread_contexts == [keep]
    assert drop.status == ThreadStatus.DONE
    assert keep.status == ThreadStatus.NORMAL


def test_remove_waits_for_backend():
    ctx = Context()
    th_ctx = _make_thread_ctx()
    ctx.insert_thread_context(th_ctx)
    ctx.accept_new_threads()
    stop = threading.Event()

    def loop():
        while not stop.is_set():
            ctx.release_removed_threads()
            stop.wait(0.001)

    th = threading.Thread(target=loop, daemon=True)
    th.start()
    ctx.remove_thread_context(th_ctx)
    stop.set()
    th.join(timeout=5)
    assert th_ctx.status == ThreadStatus.DONE
    assert th_ctx not in ctx.thread_contexts


def test_get_context_is_singleton():
    ctx = get_context()
    assert ctx.bytes_buf_size >= 1024 * 1024
    from_thread = _run_in_thread(get_context)
    assert from_thread is ctx
    assert get_context() is ctx


def test_thread_context_init_is_idempotent(backend):
    def work():
        first = thread_context_init()
        second = thread_context_init()
        same = first is second and thread_context_get() is first
        tid = first.tid
        native = threading.get_native_id()
        thread_context_cleanup()
        return same, tid, native, first

    same, tid, native, th_ctx = _run_in_thread(work)
    assert same
    assert tid == native
    assert th_ctx.status == ThreadStatus.DONE
    assert th_ctx.tid == 0
    assert th_ctx not in backend.thread_contexts


def test_auto_init_creates_context(backend):
    thread_context_set_auto_init(True)

    def work():
        th_ctx = thread_context_get()
        capacity = th_ctx.bytes_buf.capacity
        thread_context_cleanup()
        return capacity

    assert _run_in_thread(work) == backend.bytes_buf_size


def test_auto_init_disabled_returns_none(backend):
    thread_context_set_auto_init(False)

    def work():
        disabled = thread_context_get()
        thread_context_set_auto_init(True)
        enabled = thread_context_get()
        tid = enabled.tid
        native = threading.get_native_id()
        thread_context_cleanup()
        return disabled, tid, native

    disabled, tid, native = _run_in_thread(work)
    assert disabled is None
    assert tid == native


def test_cleanup_clears_thread_context(backend):
    def work():
        thread_context_init()
        thread_context_cleanup()
        thread_context_set_auto_init(False)
        return thread_context_get()

    assert _run_in_thread(work) is None