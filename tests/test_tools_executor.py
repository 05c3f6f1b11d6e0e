"""Tests for the tool registry and the tool executor."""

import pytest

from aicr.agent.context import Message, ToolCall
from aicr.agent.tools_executor import (
    ParsedToolCall,
    ToolCallResult,
    ToolExecutor,
    parse_arguments,
)
from aicr.tools import MCPTool, ToolRegistry, ToolResult, build_tool_registry, get_tool_registry

REVIEW_TOOLS = {
    "get_working_directory",
    "read_file",
    "read_multiple_files",
    "list_files",
    "search_in_files",
    "analyze_directory",
    "get_git_diff",
    "run_linter",
}


async def _boom(params: dict) -> ToolResult:
    raise RuntimeError("handler exploded")


def test_registry_holds_the_review_tools():
    registry = build_tool_registry()

    assert set(registry.list_names()) == REVIEW_TOOLS


def test_shared_registry_is_built_once():
    assert get_tool_registry() is get_tool_registry()


def test_descriptors_use_function_format():
    functions = build_tool_registry().get_openai_functions()

    assert len(functions) == len(REVIEW_TOOLS)
    for descriptor in functions:
        assert descriptor["type"] == "function"
        assert descriptor["function"]["parameters"]["type"] == "object"
    read_file = next(d for d in functions if d["function"]["name"] == "read_file")
    assert read_file["function"]["parameters"]["required"] == ["file_path"]


def test_duplicate_registration_rejected():
    registry = ToolRegistry()
    tool = MCPTool(name="x", description="", parameters={"type": "object"}, execute=_boom)
    registry.register(tool)

    with pytest.raises(ValueError):
        registry.register(tool)


@pytest.mark.asyncio
async def test_registry_converts_handler_exceptions():
    registry = ToolRegistry()
    registry.register(MCPTool(name="boom", description="", parameters={"type": "object"}, execute=_boom))

    result = await registry.execute("boom", {})

    assert not result.success
    assert result.error == "RuntimeError: handler exploded"


@pytest.mark.asyncio
async def test_unknown_tool_is_unsupported():
    result = await ToolExecutor().execute("delete_everything", {})

    assert not result.success
    assert result.error.startswith("unsupported tool: delete_everything")


@pytest.mark.parametrize("raw", ["", "{not json", "[1, 2]", "\"text\"", "null"])
def test_parse_arguments_tolerates_malformed_input(raw):
    assert parse_arguments(raw) == {}


def test_parse_tool_calls_keeps_order_and_ids():
    message = Message(
        role="assistant",
        tool_calls=(
            ToolCall(id="a", name="read_file", arguments='{"file_path": "x.go"}'),
            ToolCall(id="b", name="list_files", arguments="oops"),
        ),
    )

    parsed = ToolExecutor().parse_tool_calls(message)

    assert parsed == [
        ParsedToolCall(id="a", name="read_file", arguments={"file_path": "x.go"}),
        ParsedToolCall(id="b", name="list_files", arguments={}),
    ]


def test_failed_result_names_the_tool():
    outcome = ToolCallResult(
        tool_call_id="call_1",
        name="read_file",
        result=ToolResult.fail("file_path is required"),
    )

    assert outcome.content == "Tool execution failed: read_file\nError details: file_path is required"


def test_successful_result_passes_text_through():
    outcome = ToolCallResult("call_1", "read_file", ToolResult.ok("=== a ===\nbody"))

    assert outcome.content == "=== a ===\nbody"


@pytest.mark.asyncio
async def test_execute_one_reports_each_outcome(project):
    executor = ToolExecutor()
    calls = [
        ParsedToolCall(id="1", name="read_file", arguments={"file_path": "main.go"}),
        ParsedToolCall(id="2", name="read_file", arguments={}),
        ParsedToolCall(id="3", name="nope", arguments={}),
    ]

    results = [await executor.execute_one(call) for call in calls]

    assert [r.tool_call_id for r in results] == ["1", "2", "3"]
    assert results[0].result.success
    assert "file_path is required" in results[1].content
    assert results[2].content.startswith("Tool execution failed: nope\n")



def test_descriptors_cover_review_tools():
    names = {d["function"]["name"] for d in ToolExecutor().tool_descriptors()}

    assert names == REVIEW_TOOLS
