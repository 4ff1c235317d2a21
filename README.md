# haclog

Building blocks for a logger in which each thread writes into its own
byte ring buffer and a single background loop collects the threads'
buffers. The package provides the buffers, the shared context that
tracks the threads, and the path, OS and synchronisation helpers they
rely on.

## Install

    pip install .

To run the tests:

    pip install .[test]
    pytest

## Modules

### `haclog.errors`

- `ErrorCode`: an `IntEnum` of the error codes (`OK`, `UNKNOWN`,
  `ALLOC_MEM`, `PRINTF_SPEC_LENGTH`, `PRINTF_TYPE`, `SYS_CALL`,
  `ARGUMENTS`, `INTERRUPT`). Each has a `description`.
- `HaclogError(code, message=None)`: the exception raised by the
  package. Its `code` attribute is an `ErrorCode`. When no message is
  given, the code's description is used.
- `last_error()` and `set_error(err)` read and write a per-thread
  error slot. Until something is set, `last_error()` returns
  `ErrorCode.OK`.

### `haclog.sync`

- `SpinLock`: `lock()` keeps trying and yields between attempts.
  `unlock()` releases the lock. It also works as a context manager.
- `nsleep(ns)` sleeps for `ns` nanoseconds. A negative value raises
  `ValueError`.
- `thread_yield()` gives up the rest of the thread's time slice.
- `thread_readable_id()` returns the native thread id.
- `hardware_concurrency()` returns the processor count, never less
  than 1.

### `haclog.stacktrace`

- `print_stacktrace(stream=None)` writes the caller's stack, innermost
  frame first, as lines of the form `#<n> <file>:<line> in <function>`.
  The default stream is stdout. At most 256 frames are written.
- `debug_break()` does nothing when Python runs with `-O`. Otherwise it
  sleeps 5 ms, prints the stack and aborts the process.

### `haclog.path`

These helpers work on strings. They accept both `/` and `\` as
separators, and they raise `HaclogError` with `ErrorCode.ARGUMENTS` on
bad input.

- `isabs(path)`: true for `"/x"` or a drive form such as `"c:/"` or
  `"c:\"`.
- `exists(path)`: true if the path exists.
- `basename(path)`: the last component. It raises on an empty path or
  on a path that ends with a separator.
- `dirname(path)`: the directory part. It keeps `"/"` and `"c:/"`, and
  raises when the path has no separator.
- `join(path1, path2)`: joins the two paths with one separator. Both
  must be non-empty, and `path2` may not be `"/"` alone.
- `normpath(path)`: removes a leading `./` and resolves `..`
  segments. It returns `"./"` when nothing is left.
- `abspath(path)`: returns absolute paths unchanged. Other paths are
  joined to the working directory and normalised.

### `haclog.osutil`

Failed system calls raise `HaclogError` with `ErrorCode.SYS_CALL`.

- `process_path()`: the path of the running executable.
- `curdir()` and `chdir(path)`: read and change the working directory.
- `mkdir(path)`: creates the directory and any missing parents with
  mode `0o700`. Existing directories are kept. An empty path does
  nothing. A path longer than `MAX_PATH - 1` raises
  `ErrorCode.ARGUMENTS`.
- `remove(path)`, `rmdir(path)` and `rename(src, dst)`.
- `fopen(filepath, mode)`: resolves a relative path against the
  working directory and creates the parent directory if it is missing.
  It then opens the file. Text modes use UTF-8.

### `haclog.bytes_buffer`

`BytesBuffer(capacity, min_interval=64)` is a single-producer,
single-consumer ring of `capacity` bytes. The writer never comes
within `min_interval` bytes of the reader. A capacity below
`2 * min_interval` raises `HaclogError`.

- `find_contiguous(num_bytes, r, w)`: returns the position where
  `num_bytes` contiguous bytes can be written, starting from `w`. It
  returns `0` when the write has to wrap around, and `None` when the
  reader must move first. It raises when `num_bytes` exceeds
  `capacity // 2 - min_interval`.
- `w_move(pos)` and `r_move(pos)`: move the writer or the reader. A
  position equal to `capacity` wraps to 0. Any other out-of-range
  position raises.
- `view(pos)`: a writable `memoryview` from `pos` to the end.
- `join()`: blocks until `r == w`.

### `haclog.context`

- `get_context()` returns the process-wide `Context`. Its members:
  - `level` is the lowest level among the handlers, or `None` when
    none are registered.
  - `msg_buf_size` defaults to 2048.
  - `before_run_cb` stores a callback. Nothing in the package calls
    it.
  - `handlers` and `thread_contexts` are lists.
  - `bytes_buf_size` is the capacity given to each new thread's buffer.
    It never drops below 1 MiB.
  - `add_handler(handler)` registers any object that has a `level`
    attribute. At most 8 handlers are allowed; a ninth raises
    `ErrorCode.ALLOC_MEM`.
  - `insert_thread_context(th_ctx)` queues a thread context.
    `accept_new_threads()` moves the queued contexts into
    `thread_contexts`.
  - `remove_thread_context(th_ctx)` marks a context `WAIT_REMOVE` and
    waits until it is `DONE`. `release_removed_threads()` drops those
    contexts and marks them `DONE`.
- `ThreadContext` holds a thread's `bytes_buf`, its `tid` and its
  `status`, a `ThreadStatus` of `NORMAL`, `WAIT_REMOVE` or `DONE`.
- `thread_context_init()` creates and registers the calling thread's
  context, or returns the one that already exists.
- `thread_context_get()` returns the calling thread's context. While
  auto init is on (the default), it creates the context if there is
  none.
- `thread_context_set_auto_init(flag)` turns auto init on or off.
- `thread_context_cleanup()` waits until the thread's buffer has been
  drained. It then waits until a collecting loop has called
  `release_removed_threads()`, and finally forgets the context.

## Example

The collecting loop belongs to the caller. Here a small thread plays
that role, so that `thread_context_cleanup()` can finish:

```python
import threading

from haclog.context import get_context, thread_context_cleanup, thread_context_init
from haclog.sync import nsleep

ctx = get_context()
stop = threading.Event()


def collector():
    while not stop.is_set():
        ctx.accept_new_threads()
        ctx.release_removed_threads()
        nsleep(100_000)


def worker():
    th_ctx = thread_context_init()
    buf = th_ctx.bytes_buf
    pos = buf.find_contiguous(5, buf.r, buf.w)
    buf.view(pos)[:5] = b"hello"
    buf.w_move(pos + 5)
    buf.r_move(buf.w)          # stands in for a reader consuming the bytes
    thread_context_cleanup()


backend = threading.Thread(target=collector)
backend.start()
t = threading.Thread(target=worker)
t.start()
t.join()
stop.set()
backend.join()
```

## What the package does not do

The package has no logging front end. It offers no level-named
logging calls, no format-string serialisation into the buffers and no
record formatting. It ships no handlers (console, file or rotating
file) and does not start a background thread of its own. `Context`
only keeps a list of handler objects and the lowest level among them;
reading the buffers and writing records out is up to the caller.