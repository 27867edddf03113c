"""JSON and YAML conversion, printing and writing."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping

import yaml


def _stringify_keys(data: object) -> object:
    if isinstance(data, Mapping):
        return {str(k): _stringify_keys(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_stringify_keys(v) for v in data]
    return data


def _round_floats(data: object) -> object:
    if isinstance(data, float):
        return float(f"{data:.6f}")
    if isinstance(data, dict):
        return {k: _round_floats(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_round_floats(v) for v in data]
    return data


def _escape_html(text: str) -> str:
    return text.replace("&", "\\u0026").replace("<", "\\u003c").replace(">", "\\u003e")


def convert_to_json(data: object) -> str:
    """Encode as indented JSON with sorted keys and HTML characters escaped."""
    text = json.dumps(_stringify_keys(data), indent=3, sort_keys=True, ensure_ascii=False)
    return _escape_html(text)


def convert_to_json_fast(data: object) -> str:
    """Encode as compact JSON with sorted keys and floats cut to six digits."""
    return json.dumps(
        _round_floats(_stringify_keys(data)),
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
    )


def convert_from_json(text: str) -> object:
    """Decode a JSON string; raises ``ValueError`` on invalid input."""
    return json.loads(text)


def _write(file_path: str, text: str, file_mode: int) -> None:
    fd = os.open(file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, file_mode)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(text)


def print_as_json(data: object) -> None:
    """Print the value as JSON."""
    print(convert_to_json(data))


def write_to_file_as_json(file_path: str, data: object, file_mode: int) -> None:
    """Write the value as JSON to ``file_path``."""
    _write(file_path, convert_to_json(data), file_mode)


def convert_to_yaml(data: object) -> str:
    """Encode as a block-style YAML document with sorted keys."""
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)


def print_as_yaml(data: object) -> None:
    """Print the value as YAML."""
    print(convert_to_yaml(data))


def write_to_file_as_yaml(file_path: str, data: object, file_mode: int) -> None:
    """Write the value as YAML to ``file_path``."""
    _write(file_path, convert_to_yaml(data), file_mode)