from __future__ import annotations

import json
import logging
from typing import Sequence

from chattokens.config import Overheads
from chattokens.models import ChatRequest, ChatResponse, Message, Tool, ToolChoice
from chattokens.schema import render_tools
from chattokens.tokenizers import Tokenizer, get_tokenizer
from chattokens.values import KeyStyle, parse_object, render_document, render_value

logger = logging.getLogger(__name__)


class Counter:
    """Offline token counts for chat-completion requests and responses.

    The tokenizer is loaded once and only read afterwards. It is not
    guaranteed to be thread-safe: serialize access to a shared Counter or
    build one per worker.
    """

    def __init__(
        self,
        model: str,
        tokenizer: Tokenizer,
        overheads: Overheads | None = None,
    ) -> None:
        self.model = model
        self.tokenizer = tokenizer
        self.overheads = overheads or Overheads()

    def count_text(self, text: str) -> int:
        if not text:
            return 0
        return len(self.tokenizer.encode(text))

    def count_request(self, request: ChatRequest) -> int:
        """Prompt tokens the platform will bill for ``request``."""
        oh = self.overheads
        count = oh.reply_priming

        for message in self.prompt_messages(request):
            count += oh.per_message
            count += self.count_message(message)

        tool_messages = sum(1 for m in request.messages if m.role == "tool")
        if tool_messages > 1:
            count += oh.multi_tool_response

        if request.tool_choice is not None:
            count += self.count_text(_tool_choice_text(request.tool_choice))

        return count

    def count_response(self, response: ChatResponse) -> int:
        """Completion tokens for ``response``; the role is not billed."""
        count = 0
        for choice in response.choices:
            count += self.count_message(choice.message)
            count -= self.count_text(choice.message.role)
        return count

    def count_message(self, message: Message) -> int:
        """Tokens in a single message, whatever its role.

        Excludes the per-message framing that ``count_request`` adds, which
        makes it usable for completion messages too.
        """
        oh = self.overheads
        count = self.count_text(message.role)

        if message.role == "tool":
            count += self.count_text(_format_tool_content(message.content))
        else:
            count += self.count_text(message.content)

        for call in message.tool_calls:
            count += oh.per_tool_call
            count += self.count_text(call.type)
            count += self.count_text(call.name) * 2
            arguments = _format_arguments(call.arguments)
            if arguments is None:
                logger.debug("Skipping unparseable arguments of tool call %r", call.id)
                continue
            count += self.count_text(arguments)

        if message.tool_calls and message.content:
            count += oh.content_with_tool_calls

        if message.name:
            count += self.count_text(message.name) + oh.per_name

        return count

    def count_tools(self, tools: Sequence[Tool]) -> int:
        """Estimate the tokens ``tools`` add to a request.

        This is only an estimate: the real figure depends on whether the
        block is appended to an existing system message or becomes its own.
        Use ``count_request`` for exact numbers.
        """
        return self.count_text(render_tools(tools)) + self.overheads.tool_block

    def prompt_messages(self, request: ChatRequest) -> list[Message]:
        """Messages as the platform sees them, tool block included.

        Works on copies; ``request`` is left untouched.
        """
        messages = list(request.messages)
        if not request.tools:
            return messages

        block = render_tools(request.tools)
        for i, message in enumerate(messages):
            if message.role == "system":
                messages[i] = message.model_copy(
                    update={"content": f"{message.content}\n\n{block}"}
                )
                return messages

        return [Message(role="system", content=block), *messages]


def new_counter(model: str, overheads: Overheads | None = None) -> Counter:
    """Build a Counter for ``model``.

    Raises UnknownModelError when the model has no known vocabulary.
    """
    return Counter(model, get_tokenizer(model), overheads)


def _format_tool_content(content: str) -> str:
    # JSON tool output is re-rendered the same way as call arguments, but
    # with quoted keys. Anything else is counted as written.
    value = parse_object(content)
    if value is None:
        return content
    try:
        return render_document(value, KeyStyle.QUOTED)
    except RecursionError:
        logger.debug("Tool content nested too deeply to re-render, counting raw text")
        return content


def _format_arguments(arguments: str) -> str | None:
    # Arguments are rendered TypeScript-style, without quotes around keys
    try:
        value = json.loads(arguments)
    except (json.JSONDecodeError, RecursionError):
        return None
    try:
        if isinstance(value, dict):
            return render_document(value, KeyStyle.UNQUOTED)
        return render_value(value, KeyStyle.UNQUOTED)
    except RecursionError:
        logger.debug("Tool call arguments nested too deeply to re-render")
        return None


def _tool_choice_text(choice: ToolChoice) -> str:
    return json.dumps({"name": choice.name}, indent=1)
