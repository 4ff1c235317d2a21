"""Path string helpers with the library's own normalisation rules."""

from __future__ import annotations

import os

from haclog.errors import ErrorCode, HaclogError

_SEPS = ("/", "\\")


def _bad(message: str) -> HaclogError:
    return HaclogError(ErrorCode.ARGUMENTS, message)


def _last_sep(path: str) -> int:
    return max(path.rfind("/"), path.rfind("\\"))


def isabs(path: str) -> bool:
    """Return True if ``path`` is absolute ("/x" or a drive such as "c:/")."""
    if len(path) > 1 and path[0] == "/":
        return True
    return (
        len(path) > 2
        and path[0].isascii()
        and path[0].isalpha()
        and path[1] == ":"
        and path[2] in _SEPS
    )


def exists(path: str) -> bool:
    """Return True if ``path`` names an existing file or directory."""
    return os.path.exists(path)


def basename(path: str) -> str:
    """Return the final component of ``path``."""
    if not path:
        raise _bad("empty path")
    pos = _last_sep(path)
    if pos < 0:
        return path
    name = path[pos + 1:]
    if not name:
        raise _bad(f"path ends with a separator: {path!r}")
    return name


def dirname(path: str) -> str:
    """Return the directory part of ``path``, keeping a root or drive root."""
    if not path:
        raise _bad("empty path")
    pos = _last_sep(path)
    if pos < 0:
        raise _bad(f"path has no directory part: {path!r}")
    if pos == 0:
        pos = 1
    if pos - 1 > 0 and path[pos - 1] == ":":
        pos += 1
    return path[:pos]


def join(path1: str, path2: str) -> str:
    """Join two non-empty paths with a single separator."""
    if not path1 or not path2:
        raise _bad("cannot join empty paths")
    head = path1 if path1.endswith(_SEPS) else path1 + "/"
    tail = path2
    if tail.startswith("/"):
        if len(tail) == 1:
            raise _bad("cannot join root as second path")
        tail = tail[1:]
    return head + tail


def normpath(path: str) -> str:
    """Collapse ".." segments and a leading "./" in ``path``."""
    out: list[str] = []
    n = len(path)
    i = 0
    if not isabs(path) and path.startswith(("./", ".\\")):
        i = 2

    while i < n:
        ch = path[i]
        if ch == "." and i + 1 < n and path[i + 1] == ".":
            follow = path[i + 2] if i + 2 < n else ""
            if follow and follow not in _SEPS:
                raise _bad(f"invalid '..' segment in {path!r}")
            i += 2
            if not out or "".join(out[-3:-1]) == ".." and out[-1] in _SEPS:
                out.extend([".", "."])
                if follow:
                    out.append(follow)
            else:
                if out[-1] not in _SEPS:
                    raise _bad(f"invalid '..' segment in {path!r}")
                pos = len(out) - 2
                if pos < 0:
                    raise _bad(f"'..' escapes the root in {path!r}")
                while pos >= 0 and out[pos] not in _SEPS:
                    pos -= 1
                del out[pos + 1:]
        else:
            out.append(ch)
        if i < n:
            i += 1

    return "".join(out) if out else "./"


def abspath(path: str) -> str:
    """Return a normalised absolute version of ``path``."""
    if isabs(path):
        return path
    try:
        cwd = os.getcwd()
    except OSError as exc:
        raise HaclogError(ErrorCode.SYS_CALL, str(exc)) from exc
    return normpath(join(cwd, path))