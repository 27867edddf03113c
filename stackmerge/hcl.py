"""HCL rendering of plain data and Terraform backend configuration."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Mapping
from decimal import Decimal

from .serialize import convert_to_json_fast

_INDENT = "  "


def _is_scalar(value: object) -> bool:
    return not isinstance(value, (dict, list))


def _render_scalar(value: object) -> str:
    if value is None:
        return "null"
    return json.dumps(value, ensure_ascii=False)


def _render(value: object, depth: int) -> str:
    pad = _INDENT * depth
    inner = _INDENT * (depth + 1)
    if isinstance(value, dict):
        if not value:
            return "{}"
        body = "\n".join(
            f"{inner}{json.dumps(key, ensure_ascii=False)} = {_render(item, depth + 1)}"
            for key, item in value.items()
        )
        return "{\n" + body + "\n" + pad + "}"
    if isinstance(value, list):
        if all(_is_scalar(item) for item in value):
            return "[" + ", ".join(_render_scalar(item) for item in value) + "]"
        body = "\n".join(f"{inner}{_render(item, depth + 1)}," for item in value)
        return "[\n" + body + "\n" + pad + "]"
    return _render_scalar(value)


def convert_to_hcl(data: object) -> str:
    """Render a mapping as an HCL document with unquoted top-level names.

    Raises ``ValueError`` if the value is not a mapping.
    """
    value = json.loads(convert_to_json_fast(data))
    if not isinstance(value, dict):
        raise ValueError("an HCL document must be an object at the top level")
    lines = [
        f"{json.dumps(key, ensure_ascii=False).replace(chr(34), '')} = {_render(item, 0)}"
        for key, item in value.items()
    ]
    return "\n".join(lines) + "\n" if lines else ""


def print_as_hcl(data: object) -> None:
    """Print the value as an HCL document."""
    sys.stdout.write(convert_to_hcl(data))


def _write_without_truncating(file_path: str, text: str, file_mode: int) -> None:
    fd = os.open(file_path, os.O_WRONLY | os.O_CREAT, file_mode)
    with os.fdopen(fd, "wb") as handle:
        handle.write(text.encode("utf-8"))


def write_to_file_as_hcl(file_path: str, data: object, file_mode: int) -> None:
    """Write the value as an HCL document to ``file_path``."""
    _write_without_truncating(file_path, convert_to_hcl(data), file_mode)


def _hcl_string(text: str) -> str:
    out = ['"']
    for ch in text:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out).replace("${", "$${").replace("%{", "%%{")


def _hcl_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _backend_value(value: object) -> str | None:
    if value is None:
        return "null"
    if isinstance(value, str):
        return _hcl_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _hcl_number(value)
    return None


def write_terraform_backend_config_to_file_as_hcl(
    file_path: str, backend_type: str, backend_config: Mapping[object, object]
) -> None:
    """Write a ``terraform { backend "<type>" { ... } }`` block to ``file_path``.

    Only scalar attributes are written; keys are sorted and ``=`` signs aligned.
    """
    config = {str(key): value for key, value in backend_config.items()}
    attributes = [
        (name, rendered)
        for name in sorted(config)
        if (rendered := _backend_value(config[name])) is not None
    ]
    width = max((len(name) for name, _ in attributes), default=0)
    body = "".join(
        f"{_INDENT * 2}{name.ljust(width)} = {rendered}\n" for name, rendered in attributes
    )
    text = (
        "terraform {\n"
        f"{_INDENT}backend {_hcl_string(backend_type)} {{\n"
        f"{body}"
        f"{_INDENT}}}\n"
        "}\n"
    )
    _write_without_truncating(file_path, text, 0o644)