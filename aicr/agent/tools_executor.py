"""
Tool Executor
=============

Runs the tools the model asks for during a review.

The executor:
1. Parses tool calls from an assistant message
2. Dispatches each one by name through the tool registry
3. Formats the outcome as tool-result text for the next model call

Failures are part of the conversation, not exceptions. A bad path, an
unknown tool name or malformed arguments all come back as text such as:

    Tool execution failed: read_file
    Error details: Failed to read file: missing.go ...

so the model can see what went wrong and try again.
"""

import json
from dataclasses import dataclass
from typing import Any

from aicr.agent.context import Message, ToolCall
from aicr.tools import ToolRegistry, ToolResult, get_tool_registry
from aicr.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass
class ParsedToolCall:
    """
    A tool call with its arguments decoded.

    Attributes:
        id: The tool call ID (for matching results)
        name: The tool name
        arguments: Decoded arguments, empty when the model sent invalid JSON
    """
    id: str
    name: str
    arguments: dict[str, Any]


@dataclass
class ToolCallResult:
    """
    Result of executing a tool call.

    Attributes:
        tool_call_id: The original tool call ID
        name: The tool name
        result: The tool result
    """
    tool_call_id: str
    name: str
    result: ToolResult

    @property
    def content(self) -> str:
        """Text sent back to the model in the tool message."""
        if self.result.success:
            return self.result.to_message()
        return f"Tool execution failed: {self.name}\nError details: {self.result.error}"


def parse_arguments(raw: str) -> dict[str, Any]:
    """
    Decode a model-generated argument string.

    Anything that is not a JSON object decodes to an empty mapping, which
    makes every tool fall back to its defaults.
    """
    if not raw:
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse tool arguments: {e}")
        return {}
    if not isinstance(arguments, dict):
        logger.warning(f"Tool arguments are not an object: {type(arguments).__name__}")
        return {}
    return arguments


class ToolExecutor:
    """
    Executes the review tools requested by the model.

    Example:
        executor = ToolExecutor()

        for call in executor.parse_tool_calls(reply.message):
            outcome = await executor.execute_one(call)
            conversation.append_tool_result(outcome.tool_call_id, outcome.content)
    """

    def __init__(self, registry: ToolRegistry | None = None):
        self.registry = registry or get_tool_registry()

    def parse_tool_call(self, tool_call: ToolCall) -> ParsedToolCall:
        return ParsedToolCall(
            id=tool_call.id,
            name=tool_call.name,
            arguments=parse_arguments(tool_call.arguments),
        )

    def parse_tool_calls(self, message: Message) -> list[ParsedToolCall]:
        """Parse every tool call of an assistant message, in order."""
        return [self.parse_tool_call(tc) for tc in message.tool_calls]

    async def execute(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run one tool by name. Never raises for tool-level problems."""
        return await self.registry.execute(name, arguments)

    async def execute_one(self, tool_call: ParsedToolCall) -> ToolCallResult:
        """
        Execute a single tool call.

        Args:
            tool_call: The tool call to execute

        Returns:
            ToolCallResult with the execution result
        """
        logger.info(f"Executing tool: {tool_call.name}", tool_call.arguments or None)

        result = await self.execute(tool_call.name, tool_call.arguments)

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            result=result
        )

    def tool_descriptors(self) -> list[dict]:
        """Descriptors sent with every model call."""
        return self.registry.get_openai_functions()

