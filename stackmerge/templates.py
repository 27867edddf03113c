"""A small template engine for ``{{ .field }}`` style placeholders."""

from __future__ import annotations

import re
from collections.abc import Mapping

_ACTION = re.compile(r"\{\{(-\s)?(.*?)(\s-)?\}\}", re.DOTALL)
_FIELD_CHAIN = re.compile(r"^\.(?:[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)?$")
_STRING_LITERAL = re.compile(r'^"((?:[^"\\]|\\.)*)"$')


class TemplateError(Exception):
    """Raised when a template cannot be parsed or executed."""


def _format(value: object) -> str:
    if value is None:
        return "<no value>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _resolve(name: str, expr: str, data: object) -> object:
    if expr == ".":
        return data
    value = data
    for key in expr[1:].split("."):
        if not isinstance(value, Mapping):
            raise TemplateError(f"template: {name}: can't evaluate field {key} in {expr}")
        if key not in value:
            raise TemplateError(
                f'template: {name}: executing "{name}" at <{expr}>: map has no entry for key "{key}"'
            )
        value = value[key]
    return value


def _evaluate(name: str, action: str, data: object) -> str:
    action = action.strip()
    if action.startswith("/*"):
        if not action.endswith("*/"):
            raise TemplateError(f"template: {name}: unclosed comment")
        return ""
    if _FIELD_CHAIN.match(action):
        return _format(_resolve(name, action, data))
    literal = _STRING_LITERAL.match(action)
    if literal:
        return bytes(literal.group(1), "utf-8").decode("unicode_escape")
    raise TemplateError(f"template: {name}: unsupported action {{{{{action}}}}}")


def process_template(name: str, text: str, data: object) -> str:
    """Render ``text`` with ``data``; a missing key raises ``TemplateError``."""
    pieces: list[str] = []
    position = 0
    trim_next = False
    for match in _ACTION.finditer(text):
        chunk = text[position:match.start()]
        if trim_next:
            chunk = chunk.lstrip()
        if match.group(1):
            chunk = chunk.rstrip()
        pieces.append(chunk)
        pieces.append(_evaluate(name, match.group(2), data))
        trim_next = bool(match.group(3))
        position = match.end()
    rest = text[position:]
    if "{{" in rest:
        raise TemplateError(f"template: {name}: unclosed action")
    pieces.append(rest.lstrip() if trim_next else rest)
    return "".join(pieces)