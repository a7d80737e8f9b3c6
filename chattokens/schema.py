"""Render tool definitions as the TypeScript-like namespace block the platform
injects into the system prompt."""
from __future__ import annotations

from typing import Any, Sequence

from chattokens.models import Tool

HEADER = ["# Tools", "## functions", "namespace functions {"]
FOOTER = "} // namespace functions"


def render_tools(tools: Sequence[Tool]) -> str:
    lines = list(HEADER)
    for tool in tools:
        if tool.description:
            lines.append(f"// {tool.description}")
        if _properties(tool.parameters):
            lines.append(f"type {tool.name} = (_: {{")
            lines.append(render_properties(tool.parameters, 0))
            lines.append("}) => any;")
        else:
            lines.append(f"type {tool.name} = () => any;")
    lines.append(FOOTER)
    return "\n".join(lines)


def render_properties(node: dict[str, Any], indent: int) -> str:
    """Render the property list of an object schema node, one field per line."""
    properties = _properties(node)
    required = node.get("required")
    if not isinstance(required, list):
        required = []

    lines: list[str] = []
    for key, prop in properties.items():
        if not isinstance(prop, dict):
            continue
        description = prop.get("description")
        if isinstance(description, str) and description:
            lines.append(f"// {description}")
        suffix = "" if key in required else "?"
        lines.append(f"{key}{suffix}:{render_type(prop, indent)},")

    pad = " " * indent
    return "\n".join(pad + line for line in lines)


def render_type(node: dict[str, Any], indent: int) -> str:
    enum = node.get("enum")
    if not isinstance(enum, list):
        enum = None

    match node.get("type"):
        case "string":
            if enum is not None:
                return " | ".join(f'"{v}"' for v in enum)
            return "string"
        case "integer" | "number":
            if enum is not None:
                return " | ".join(_literal(v) for v in enum)
            return "number"
        case "boolean":
            return "boolean"
        case "null":
            return "null"
        case "array":
            items = node.get("items")
            if isinstance(items, dict):
                return f"{render_type(items, indent)}[]"
            return "any[]"
        case "object":
            if _properties(node):
                return "{\n" + render_properties(node, indent + 2) + "\n}"
            return "{}"
        case _:
            return ""


def _properties(node: dict[str, Any]) -> dict[str, Any]:
    properties = node.get("properties")
    return properties if isinstance(properties, dict) else {}


def _literal(v: Any) -> str:
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)
