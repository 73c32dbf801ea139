"""Token estimates for chat messages.

Per-message overheads follow OpenAI's published accounting for chat models:
each message costs a fixed number of framing tokens plus its content, role
and optional name, and every reply is primed with three more tokens.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from pydantic import BaseModel

logger = logging.getLogger("llm-parse")

REPLY_PRIMING_TOKENS = 3  # <|start|>assistant<|message|>

TokenCounter = Callable[[str], Awaitable[int]]


class FunctionCall(BaseModel):
    name: str = ""
    arguments: str = ""


class ChatMessage(BaseModel):
    role: str
    content: str | None = None
    name: str | None = None
    function_call: FunctionCall | None = None


class TokenCount(BaseModel):
    total: int
    per_message: list[int]


def model_name_for_tiktoken(model: str) -> str:
    """Collapse dated or variant model ids to the family tiktoken knows."""
    if model.startswith("gpt-3.5-turbo"):
        return "gpt-3.5-turbo"
    if model.startswith("gpt-4"):
        return "gpt-4"
    return model


def _message_overheads(model: str) -> tuple[int, int]:
    """Return (tokens per message, tokens per name) for *model*."""
    name = model_name_for_tiktoken(model)
    if name == "gpt-4":
        return 3, 1
    if name != "gpt-3.5-turbo":
        logger.debug("No token overheads known for %s, using gpt-3.5-turbo's", model)
    return 4, -1


async def get_num_tokens_for_chat_messages(
    messages: Sequence[ChatMessage | dict],
    model: str,
    get_num_tokens: TokenCounter,
    concurrency: int = 8,
) -> TokenCount:
    """Estimate the prompt tokens used by *messages*.

    At most *concurrency* messages are counted at once. ``per_message`` keeps
    the input order regardless of completion order.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    per_message_overhead, per_name_overhead = _message_overheads(model)
    semaphore = asyncio.Semaphore(concurrency)
    parsed = [ChatMessage.model_validate(m) for m in messages]

    async def count(message: ChatMessage) -> int:
        content = message.content or ""
        if message.function_call is not None:
            content = message.function_call.arguments or ""

        async with semaphore:
            n_content, n_role = await asyncio.gather(
                get_num_tokens(content), get_num_tokens(message.role)
            )
            n_name = 0
            if message.name:
                n_name = await get_num_tokens(message.name) + per_name_overhead

        return per_message_overhead + n_content + n_role + n_name

    per_message = list(await asyncio.gather(*(count(m) for m in parsed)))
    total = sum(per_message) + REPLY_PRIMING_TOKENS
    return TokenCount(total=total, per_message=per_message)
