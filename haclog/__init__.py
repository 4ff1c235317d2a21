"""Per-thread byte ring buffers, a shared thread context, and path, OS and sync helpers."""

__version__ = "0.1.0"

__all__ = ["bytes_buffer", "context", "errors", "osutil", "path", "stacktrace", "sync"]