"""Glob matching with ``**`` support and cached lookups."""

from __future__ import annotations

import os
import posixpath
import re
import threading

_META = "*?[{\\"
_cache: dict[str, list[str]] = {}
_cache_lock = threading.Lock()


def split_pattern(pattern: str) -> tuple[str, str]:
    """Split a pattern into a literal base directory and the remaining pattern."""
    meta_positions = [i for i, ch in enumerate(pattern) if ch in _META]
    if meta_positions:
        split = pattern.rfind("/", 0, meta_positions[0])
    else:
        split = pattern.rfind("/")
    if split == 0:
        return "/", pattern[1:]
    if split > 0:
        return pattern[:split], pattern[split + 1:]
    return ".", pattern


def _find_close(pattern: str, start: int, open_ch: str, close_ch: str) -> int:
    depth = 0
    i = start
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ValueError(f"syntax error in pattern: {pattern!r}")


def _split_alternatives(body: str) -> list[str]:
    parts, depth, current, i = [], 0, [], 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            current.append(body[i:i + 2])
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def _translate(pattern: str) -> str:
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= n:
                raise ValueError(f"syntax error in pattern: {pattern!r}")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif ch == "*":
            if pattern.startswith("**", i) and (i == 0 or pattern[i - 1] == "/"):
                end = i + 2
                if end == n:
                    out.append(".*")
                    i = end
                    continue
                if pattern[end] == "/":
                    out.append("(?:.*/)?")
                    i = end + 1
                    continue
            while i < n and pattern[i] == "*":
                i += 1
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
            i += 1
        elif ch == "[":
            close = pattern.find("]", i + 2 if i + 1 < n and pattern[i + 1] in "!^" else i + 1)
            if close == -1:
                raise ValueError(f"syntax error in pattern: {pattern!r}")
            body = pattern[i + 1:close]
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\")
            out.append(f"[{'^/' if negate else ''}{body}]" if negate else f"[{body}]")
            i = close + 1
        elif ch == "{":
            close = _find_close(pattern, i, "{", "}")
            alternatives = _split_alternatives(pattern[i + 1:close])
            out.append("(?:" + "|".join(_translate(a) for a in alternatives) + ")")
            i = close + 1
        else:
            out.append(re.escape(ch))
            i += 1
    return "".join(out)


def path_match(pattern: str, name: str) -> bool:
    """True if ``name`` matches ``pattern``; raises ``ValueError`` on a bad pattern."""
    return re.fullmatch(_translate(pattern), name, re.DOTALL) is not None


def _walk(base: str):
    for root, dirs, files in os.walk(base):
        dirs.sort()
        rel_root = os.path.relpath(root, base).replace(os.sep, "/")
        for entry in sorted(dirs + files):
            yield entry if rel_root == "." else f"{rel_root}/{entry}"


def get_glob_matches(pattern: str) -> list[str]:
    """Return the paths matching ``pattern``, caching results per pattern.

    Raises ``FileNotFoundError`` when nothing matches.
    """
    with _cache_lock:
        cached = _cache.get(pattern)
    if cached:
        return list(cached)

    base, clean = split_pattern(pattern)
    regex = re.compile(_translate(clean), re.DOTALL)
    matches = sorted(rel for rel in _walk(base) if regex.fullmatch(rel)) if os.path.isdir(base) else []
    if not matches:
        raise FileNotFoundError(
            f"failed to find a match for the import '{pattern}' ('{base}' + '{clean}')"
        )
    full = [posixpath.normpath(posixpath.join(base, m)) for m in matches]
    with _cache_lock:
        _cache[pattern] = full
    return list(full)