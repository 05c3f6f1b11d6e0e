"""
Review Tools
============

The fixed set of tools the model may call while reviewing code. Each tool
follows the MCP (Model Context Protocol) shape:
- a name and a description shown to the model
- a JSON Schema for its parameters
- an async handler that returns a ToolResult

Tools:
    get_working_directory   Where relative paths are resolved from
    read_file               One file, truncated to 10,000 characters
    read_multiple_files     Up to 10 files in one call
    list_files              Glob in a directory, optionally recursive
    search_in_files         Literal substring search with line numbers
    analyze_directory       File counts, sizes and code files
    get_git_diff            `git diff <target>`
    run_linter              Language-specific linter for one file

Handlers never raise for expected problems (missing files, bad arguments,
missing binaries). They return ``ToolResult(success=False, error=...)``
and the agent feeds that text back to the model so it can correct itself.

This module provides:
- ToolResult for standardized responses
- MCPTool for declaring tools
- ToolRegistry for name lookup and dispatch
- get_tool_registry() returning the registry with every review tool
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Awaitable

from aicr.utils.logger import Logger

logger = Logger("Tools")


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed successfully
        data: The result text (or JSON-serializable data)
        error: Error message if success is False
    """
    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any) -> "ToolResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)

    def to_message(self) -> str:
        """Format the successful payload, or the bare error, as text."""
        if not self.success:
            return f"Error: {self.error}"
        if isinstance(self.data, str):
            return self.data
        return json.dumps(self.data, default=str, ensure_ascii=False)


@dataclass(frozen=True)
class MCPTool:
    """
    Definition of a tool following the MCP pattern.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model)
        parameters: JSON Schema for the parameters
        execute: Async function that runs the tool

    Example:
        async def _read_file(params: dict) -> ToolResult:
            ...

        read_file_tool = MCPTool(
            name="read_file",
            description="Read the contents of a file",
            parameters={
                "type": "object",
                "properties": {
                    "file_path": {"type": "string", "description": "File path"}
                },
                "required": ["file_path"]
            },
            execute=_read_file
        )
    """
    name: str
    description: str
    parameters: dict
    execute: Callable[[dict], Awaitable[ToolResult]]

    def to_openai_function(self) -> dict:
        """Convert to the chat-completions ``tools`` entry format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


class ToolRegistry:
    """
    Name-to-tool lookup for the review tools.

    Example:
        registry = ToolRegistry()
        registry.register(read_file_tool)

        result = await registry.execute("read_file", {"file_path": "main.go"})
        functions = registry.get_openai_functions()
    """

    def __init__(self):
        self._tools: dict[str, MCPTool] = {}

    def register(self, tool: MCPTool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> MCPTool | None:
        return self._tools.get(name)

    def get_openai_functions(self) -> list[dict]:
        """Get every tool descriptor in chat-completions format."""
        return [tool.to_openai_function() for tool in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    async def execute(self, name: str, params: dict) -> ToolResult:
        """
        Execute a tool by name.

        Unknown names and unexpected handler exceptions both come back as a
        failed ToolResult, so a single bad call can never abort a review.

        Args:
            name: The tool name
            params: Parameters to pass to the tool

        Returns:
            ToolResult from the tool execution
        """
        tool = self.get(name)
        if not tool:
            return ToolResult.fail(
                f"unsupported tool: {name}. Available tools: {', '.join(self.list_names())}"
            )

        try:
            return await tool.execute(params)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult.fail(f"{type(e).__name__}: {e}")


def build_tool_registry() -> ToolRegistry:
    """Create a registry holding every review tool."""
    # Imported here because the tool modules import MCPTool from this package
    from aicr.tools import file_tools, search_tools, vcs_tools

    registry = ToolRegistry()
    file_tools.register_file_tools(registry)
    search_tools.register_search_tools(registry)
    vcs_tools.register_vcs_tools(registry)

    logger.debug(f"Registered {len(registry.list_names())} tools")
    return registry


_registry_instance: ToolRegistry | None = None


def get_tool_registry() -> ToolRegistry:
    """Get the shared registry. It is never mutated after it is built."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = build_tool_registry()
    return _registry_instance


__all__ = [
    "MCPTool",
    "ToolResult",
    "ToolRegistry",
    "build_tool_registry",
    "get_tool_registry",
]
