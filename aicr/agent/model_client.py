"""
Model Client
============

Sends the conversation and the tool descriptors to the chat-completions
endpoint and returns the first choice as an assistant Message.

Request:   POST <base_url>/chat/completions
           Authorization: Bearer <DEEPSEEK_API_KEY>
           {"model": ..., "messages": [...], "tools": [...]}
Response:  {"choices": [{"message": {...}, "finish_reason": "..."}]}

There is no retry policy: the underlying client is created with
``max_retries=0`` and any transport, status or decoding problem is raised
as ModelClientError, which ends the review.
"""

from dataclasses import dataclass
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from aicr.agent.context import Message, ToolCall
from aicr.agent.errors import ModelClientError
from aicr.utils.config import Config, get_config
from aicr.utils.logger import Logger

logger = Logger("ModelClient")


@dataclass(frozen=True)
class ModelReply:
    """The first choice of a chat completion."""
    message: Message
    finish_reason: str | None = None


def _to_tool_call(raw: Any) -> ToolCall:
    function = getattr(raw, "function", None)
    arguments = getattr(function, "arguments", None)
    return ToolCall(
        id=getattr(raw, "id", None) or "",
        name=getattr(function, "name", None) or "",
        arguments=arguments if isinstance(arguments, str) else "",
    )


def _to_message(raw: Any) -> Message:
    """Convert an SDK ``ChatCompletionMessage`` into an assistant Message."""
    content = getattr(raw, "content", None)
    tool_calls = tuple(_to_tool_call(tc) for tc in (getattr(raw, "tool_calls", None) or []))

    # Tool results are matched back by id, so ids must be present and unique
    seen = set()
    for tc in tool_calls:
        if not tc.id:
            raise ModelClientError(f"Model returned a tool call without an id ({tc.name or 'unnamed'})")
        if tc.id in seen:
            raise ModelClientError(f"Model returned duplicate tool call id {tc.id}")
        seen.add(tc.id)

    return Message(
        role="assistant",
        content=content if isinstance(content, str) else None,
        tool_calls=tool_calls,
    )


class ModelClient:
    """
    Chat-completions client for the review agent.

    Example:
        client = ModelClient.from_config()
        reply = await client.complete(conversation.to_openai_messages(), tools)
        print(reply.finish_reason, reply.message.content)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout_seconds: float = 300,
        http_client: httpx.AsyncClient | None = None
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer token for the endpoint
            base_url: Endpoint prefix, "/chat/completions" is appended
            model: Model name sent with every request
            timeout_seconds: Timeout for a single remote call
            http_client: Optional httpx client (tests pass a MockTransport)
        """
        self.model = model
        self.openai = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_config(cls, config: Config | None = None) -> "ModelClient":
        config = config or get_config()
        return cls(
            api_key=config.model.api_key,
            base_url=config.model.base_url,
            model=config.model.name,
            timeout_seconds=config.model.request_timeout_seconds,
        )

    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None
    ) -> ModelReply:
        """
        Perform one chat completion.

        Args:
            messages: Serialized conversation
            tools: Tool descriptors, omitted from the request when empty

        Returns:
            The first choice's message and stop reason

        Raises:
            ModelClientError: On transport failure, an error status, an
                undecodable body, or a response without choices
        """
        request: dict[str, Any] = {"model": self.model, "messages": messages}
        if tools:
            request["tools"] = tools

        try:
            response = await self.openai.chat.completions.create(**request)
        except openai.APIError as e:
            logger.error("Chat completion request failed", e)
            raise ModelClientError(f"LLM call failed: {e}") from e
        except ValueError as e:
            raise ModelClientError(f"Could not decode LLM response: {e}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ModelClientError("LLM returned no choices")

        choice = choices[0]
        message = getattr(choice, "message", None)
        if message is None:
            raise ModelClientError("LLM returned a choice without a message")

        return ModelReply(
            message=_to_message(message),
            finish_reason=getattr(choice, "finish_reason", None),
        )

    async def close(self) -> None:
        await self.openai.close()
