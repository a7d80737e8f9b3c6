"""Canonical text renderings of JSON values.

The platform re-renders tool payloads before tokenizing them: tool-response
content with quoted keys, tool-call arguments TypeScript-style with bare
keys. Both share the same value syntax.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any


class KeyStyle(Enum):
    QUOTED = "quoted"  # tool-response content
    UNQUOTED = "unquoted"  # tool-call arguments


def render_document(obj: dict[str, Any], style: KeyStyle) -> str:
    """Render a top-level object, one line, newline-terminated."""
    return render_object(obj, style) + "\n"


def render_object(obj: dict[str, Any], style: KeyStyle) -> str:
    fields = [render_field(key, value, style) for key, value in obj.items()]
    return "{" + ",".join(fields) + "}"


def render_field(key: str, value: Any, style: KeyStyle) -> str:
    if style is KeyStyle.QUOTED:
        return f"{_quote(key)}:{render_value(value, style)}"
    return f"{key}:{render_value(value, style)}"


def render_value(value: Any, style: KeyStyle) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return _number(value)
        case str():
            return _quote(value)
        case list() | tuple():
            return "[" + ",".join(render_value(v, style) for v in value) + "]"
        case dict():
            return render_object(value, style)
        case _:
            return _quote(str(value))


def parse_object(text: str) -> dict[str, Any] | None:
    """Decode ``text`` as a JSON object, or None if it is anything else."""
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def _quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _number(n: int | float) -> str:
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return json.dumps(n)
