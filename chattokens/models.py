from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Role = Literal["system", "user", "assistant", "tool"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ToolCall(_Frozen):
    id: str = ""
    type: Literal["function"] = "function"
    name: str
    arguments: str = ""  # raw JSON text, possibly malformed

    @model_validator(mode="before")
    @classmethod
    def _flatten_function(cls, data: Any) -> Any:
        # Wire form nests name/arguments under "function"
        if isinstance(data, dict) and isinstance(data.get("function"), dict):
            data = {k: v for k, v in data.items() if k != "function"} | data["function"]
        return data

    @field_validator("arguments", mode="before")
    @classmethod
    def _encode_arguments(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (dict, list)):
            return json.dumps(v)
        return v


class Message(_Frozen):
    role: Role
    content: str = ""
    name: str | None = None  # user/system/tool only
    tool_call_id: str | None = None  # for role="tool" responses
    tool_calls: tuple[ToolCall, ...] = Field(default_factory=tuple)

    @field_validator("content", mode="before")
    @classmethod
    def _null_content(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("tool_calls", mode="before")
    @classmethod
    def _null_tool_calls(cls, v: Any) -> Any:
        return () if v is None else v


class Tool(_Frozen):
    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)  # JSON Schema object

    @model_validator(mode="before")
    @classmethod
    def _flatten_function(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("function"), dict):
            return data["function"]
        return data

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("parameters", mode="before")
    @classmethod
    def _null_parameters(cls, v: Any) -> Any:
        return {} if v is None else v


class ToolChoice(_Frozen):
    type: Literal["function"] = "function"
    name: str

    @model_validator(mode="before")
    @classmethod
    def _flatten_function(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("function"), dict):
            return {"type": data.get("type", "function"), "name": data["function"].get("name")}
        return data


class ChatRequest(_Frozen):
    messages: tuple[Message, ...] = Field(default_factory=tuple)
    tools: tuple[Tool, ...] = Field(default_factory=tuple)
    tool_choice: ToolChoice | None = None

    @field_validator("tools", mode="before")
    @classmethod
    def _null_tools(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("tool_choice", mode="before")
    @classmethod
    def _string_choice(cls, v: Any) -> Any:
        # "auto" | "none" | "required" do not force a specific tool
        return None if isinstance(v, str) else v


class Choice(_Frozen):
    message: Message


class ChatResponse(_Frozen):
    choices: tuple[Choice, ...] = Field(default_factory=tuple)
