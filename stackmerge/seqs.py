"""Small helpers for sequences of strings and mappings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


def unique_strings(values: Iterable[str]) -> list[str]:
    """Return the values with duplicates removed, keeping first occurrences in order."""
    return list(dict.fromkeys(values))


def sorted_string_keys(mapping: Mapping[str, object]) -> list[str]:
    """Return the keys of a mapping, sorted."""
    return sorted(mapping)


def any_prefix_of(prefixes: Iterable[str], text: str) -> bool:
    """True if any of ``prefixes`` is a prefix of ``text``."""
    return any(text.startswith(prefix) for prefix in prefixes)


def any_has_prefix(values: Iterable[str], prefix: str) -> bool:
    """True if any of ``values`` starts with ``prefix``."""
    return any(value.startswith(prefix) for value in values)


def join_with_spaces(values: Iterable[str]) -> str:
    """Join the values with single spaces."""
    return " ".join(values)


def convert_env_vars(env: Mapping[object, object]) -> list[str]:
    """Turn a mapping of environment variables into ``KEY=VALUE`` strings."""
    return [f"{key}={value}" for key, value in env.items()]