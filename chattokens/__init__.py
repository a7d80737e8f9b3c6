"""Offline token counting for chat-completion requests and responses."""
from __future__ import annotations

from chattokens.config import Overheads
from chattokens.counter import Counter, new_counter
from chattokens.models import ChatRequest, ChatResponse, Choice, Message, Tool, ToolCall, ToolChoice
from chattokens.tokenizers import Tokenizer, UnknownModelError

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Choice",
    "Counter",
    "Message",
    "Overheads",
    "Tokenizer",
    "Tool",
    "ToolCall",
    "ToolChoice",
    "UnknownModelError",
    "new_counter",
]
