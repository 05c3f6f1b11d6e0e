"""Fakes and builders shared by the agent tests."""

import asyncio
import copy
import json
from typing import Any

from aicr.agent.context import Message, ToolCall
from aicr.agent.model_client import ModelReply


def final_reply(content: str) -> ModelReply:
    """An assistant turn with no tool calls."""
    return ModelReply(message=Message(role="assistant", content=content), finish_reason="stop")


def tool_reply(*calls: tuple[str, str, Any], content: str | None = None) -> ModelReply:
    """
    An assistant turn requesting tools.

    Each call is (id, name, arguments); dict arguments are JSON-encoded,
    strings are passed through untouched so tests can send malformed JSON.
    """
    tool_calls = tuple(
        ToolCall(
            id=call_id,
            name=name,
            arguments=arguments if isinstance(arguments, str) else json.dumps(arguments),
        )
        for call_id, name, arguments in calls
    )
    return ModelReply(
        message=Message(role="assistant", content=content, tool_calls=tool_calls),
        finish_reason="tool_calls",
    )


class FakeModelClient:
    """
    Scripted stand-in for ModelClient.

    Replies are returned in order; an exception in the script is raised
    instead. Once the script is exhausted the last entry repeats. Every
    call's messages are deep-copied into ``calls``.
    """

    def __init__(self, *script: ModelReply | BaseException, delay: float = 0.0):
        self.script = list(script)
        self.delay = delay
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def complete(self, messages, tools=None) -> ModelReply:
        self.calls.append({"messages": copy.deepcopy(messages), "tools": tools})
        if self.delay:
            await asyncio.sleep(self.delay)
        index = min(len(self.calls) - 1, len(self.script) - 1)
        entry = self.script[index]
        if isinstance(entry, BaseException):
            raise entry
        return entry

    async def close(self) -> None:
        self.closed = True
