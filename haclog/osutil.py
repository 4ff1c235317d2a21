"""Operating-system helpers: working directory, directory creation and file opening."""

from __future__ import annotations

import os
import sys
from typing import IO

from haclog.errors import ErrorCode, HaclogError
from haclog.path import dirname, exists, isabs, join

_WINDOWS = os.name == "nt"

MAX_PATH = 260 if _WINDOWS else 1024

_MKDIR_SEPS = ("/", "\\") if _WINDOWS else ("/",)


def _sys_call_error(exc: OSError) -> HaclogError:
    return HaclogError(ErrorCode.SYS_CALL, str(exc))


def process_path() -> str:
    """Return the path of the executable running the current process."""
    proc_exe = f"/proc/{os.getpid()}/exe"
    if os.path.exists(proc_exe):
        try:
            return os.readlink(proc_exe)
        except OSError as exc:
            raise _sys_call_error(exc) from exc
    if not sys.executable:
        raise HaclogError(ErrorCode.SYS_CALL, "cannot determine process path")
    return os.path.realpath(sys.executable)


def curdir() -> str:
    """Return the current working directory."""
    try:
        return os.getcwd()
    except OSError as exc:
        raise _sys_call_error(exc) from exc


def chdir(path: str) -> None:
    """Change the current working directory to ``path``."""
    try:
        os.chdir(path)
    except OSError as exc:
        raise _sys_call_error(exc) from exc


def _is_drive(prefix: str) -> bool:
    return _WINDOWS and len(prefix) == 2 and prefix[1] == ":"


def mkdir(path: str) -> None:
    """Create the directory ``path`` and any missing parents; existing ones are kept."""
    if not path:
        return
    if len(path) > MAX_PATH - 1:
        raise HaclogError(ErrorCode.ARGUMENTS, f"path too long: {path!r}")

    prefixes = [path[:i] for i in range(1, len(path)) if path[i] in _MKDIR_SEPS]
    prefixes.append(path)
    for prefix in prefixes:
        if _is_drive(prefix):
            continue
        try:
            os.mkdir(prefix, 0o700)
        except FileExistsError:
            continue
        except OSError as exc:
            raise _sys_call_error(exc) from exc


def remove(path: str) -> None:
    """Remove the file ``path`` (on POSIX an empty directory is removed too)."""
    try:
        if not _WINDOWS and os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            os.remove(path)
    except OSError as exc:
        raise _sys_call_error(exc) from exc


def rmdir(path: str) -> None:
    """Delete the empty directory ``path``."""
    try:
        os.rmdir(path)
    except OSError as exc:
        raise _sys_call_error(exc) from exc


def rename(src: str, dst: str) -> None:
    """Rename the file or directory ``src`` to ``dst``."""
    try:
        os.rename(src, dst)
    except OSError as exc:
        raise _sys_call_error(exc) from exc


def fopen(filepath: str, mode: str) -> IO:
    """Open ``filepath`` with ``mode``, creating its directory first if missing."""
    abs_filepath = filepath if isabs(filepath) else join(curdir(), filepath)
    file_dir = dirname(abs_filepath)
    if not exists(file_dir):
        mkdir(file_dir)
    try:
        if "b" in mode:
            return open(abs_filepath, mode)
        return open(abs_filepath, mode, encoding="utf-8")
    except OSError as exc:
        raise _sys_call_error(exc) from exc