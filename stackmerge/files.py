"""Filesystem path helpers."""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterable

_YAML_EXTENSIONS = (".yaml", ".yml")


def _clean_join(*parts: str) -> str:
    return posixpath.normpath(posixpath.join(*parts))


def is_directory(path: str) -> bool:
    """True if ``path`` is a directory; raises ``OSError`` if it cannot be stat'ed."""
    return os.path.isdir(os.stat(path) and path)


def file_exists(path: str) -> bool:
    """True if ``path`` exists and is not a directory."""
    try:
        return not os.path.isdir(path) and os.path.exists(path) and bool(os.stat(path))
    except OSError:
        return False


def file_or_dir_exists(path: str) -> bool:
    """True if ``path`` exists."""
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def is_yaml(path: str) -> bool:
    """True if the path has a YAML extension."""
    return posixpath.splitext(path)[1] in _YAML_EXTENSIONS


def convert_paths_to_absolute_paths(paths: Iterable[str]) -> list[str]:
    """Return the absolute form of each path."""
    return [os.path.abspath(p) for p in paths]


def join_absolute_path_with_paths(base_path: str, paths: Iterable[str]) -> list[str]:
    """Join the base path with each path."""
    return [_clean_join(base_path, p) for p in paths]


def trim_base_path_from_path(base_path: str, path: str) -> str:
    """Remove ``base_path`` from the start of ``path`` if present."""
    return path[len(base_path):] if path.startswith(base_path) else path


def is_path_absolute(path: str) -> bool:
    """True if the path is absolute."""
    return os.path.isabs(path)


def join_absolute_path_with_path(base_path: str, provided_path: str) -> str:
    """Resolve ``provided_path`` against ``base_path``; the result must exist."""
    if os.path.isabs(provided_path):
        return provided_path
    joined = _clean_join(base_path, provided_path)
    if os.path.isabs(joined) and os.path.exists(joined):
        return joined
    absolute = os.path.abspath(joined)
    os.stat(absolute)
    return absolute


def ensure_dir(file_name: str) -> None:
    """Create every missing parent directory of ``file_name``."""
    directory = os.path.dirname(file_name) or "."
    if not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _dir(path: str) -> str:
    directory = posixpath.dirname(path)
    return posixpath.normpath(directory) if directory else "."


def slice_of_paths_contains_path(paths: Iterable[str], check_path: str) -> bool:
    """True if the directory of any of ``paths`` equals ``check_path``."""
    return any(_dir(p) == check_path for p in paths)