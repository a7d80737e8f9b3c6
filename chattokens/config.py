from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

CONFIG_DIR = Path("~/.chattokens").expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"


class Overheads(BaseModel):
    """Fixed token costs the platform adds around rendered text.

    These were calibrated against live usage figures. ``multi_tool_response``
    has no known cause; recalibrate it if upstream formatting changes.
    """

    model_config = ConfigDict(frozen=True)

    reply_priming: int = 3  # <|start|>assistant<|message|>
    per_message: int = 3
    per_tool_call: int = 4
    per_name: int = 1
    content_with_tool_calls: int = 4
    multi_tool_response: int = 13
    tool_block: int = 3


DEFAULTS: dict[str, Any] = {
    "model": {
        "name": "gpt-4o",
    },
    "overheads": Overheads().model_dump(),
}


def load() -> dict[str, Any]:
    """Load config from ~/.chattokens/config.toml, merging with defaults."""
    config = _deep_merge({}, DEFAULTS)
    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            on_disk = tomllib.load(f)
        config = _deep_merge(config, on_disk)
    return config


def save(config: dict[str, Any]) -> None:
    """Save config dict to ~/.chattokens/config.toml (manual TOML serialization)."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    lines = _dict_to_toml(config)
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def model_name(config: dict[str, Any]) -> str:
    return config["model"]["name"]


def overheads(config: dict[str, Any]) -> Overheads:
    return Overheads.model_validate(config.get("overheads", {}))


def _deep_merge(base: dict, override: dict) -> dict:
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict):
            # Copy nested tables so callers never share DEFAULTS
            prior = result.get(k)
            result[k] = _deep_merge(prior if isinstance(prior, dict) else {}, v)
        else:
            result[k] = v
    return result


def _dict_to_toml(d: dict[str, Any]) -> list[str]:
    """Minimal TOML serializer for one level of tables with scalar values."""
    lines: list[str] = []
    sections: list[tuple[str, dict]] = []

    for k, v in d.items():
        if isinstance(v, dict):
            sections.append((k, v))
        else:
            lines.append(f'{k} = {_toml_value(v)}')

    for section_key, section_val in sections:
        if lines:
            lines.append("")
        lines.append(f"[{section_key}]")
        for sk, sv in section_val.items():
            lines.append(f'{sk} = {_toml_value(sv)}')

    return lines


def _toml_value(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int):
        return str(v)
    if isinstance(v, float):
        return str(v)
    if isinstance(v, str):
        return '"' + v.replace("\\", "\\\\").replace('"', '\\"') + '"'
    raise ValueError(f"Unsupported TOML value type: {type(v)}")
