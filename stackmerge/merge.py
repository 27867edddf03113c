"""Deep merging of configuration mappings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class StackConfigError(Exception):
    """Raised when a stack configuration is invalid."""


def _copy(value: object) -> object:
    if isinstance(value, Mapping):
        return {key: _copy(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_copy(item) for item in value]
    return value


def _merge_into(target: dict, source: Mapping) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_into(existing, value)
        else:
            target[key] = _copy(value)


def merge(maps: Iterable[Mapping | None]) -> dict:
    """Deep-merge the mappings left to right; later values override earlier ones.

    Nested mappings are merged, every other value (lists included) is replaced.
    ``None`` entries count as empty. The inputs are never modified.
    """
    result: dict = {}
    for mapping in maps:
        if mapping is None:
            continue
        if not isinstance(mapping, Mapping):
            raise StackConfigError(f"cannot merge a value of type {type(mapping).__name__}")
        _merge_into(result, mapping)
    return result