"""Tests for the conversation state and its tool-call pairing rules."""

import pytest

from aicr.agent.context import SYSTEM_PROMPT, Conversation, Message, ToolCall


def _assistant(*ids: str, content: str | None = None) -> Message:
    return Message(
        role="assistant",
        content=content,
        tool_calls=tuple(ToolCall(id=i, name="read_file", arguments="{}") for i in ids),
    )


def test_start_seeds_system_and_user():
    conversation = Conversation.start("Please review main.go")

    assert conversation.to_openai_messages() == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "Please review main.go"},
    ]


def test_assistant_tool_calls_serialize_without_content():
    message = _assistant("call_1")

    assert message.to_openai() == {
        "role": "assistant",
        "tool_calls": [
            {"id": "call_1", "type": "function", "function": {"name": "read_file", "arguments": "{}"}}
        ],
    }


@pytest.mark.parametrize(
    "kwargs",
    [
        {"role": "tool", "content": "x"},
        {"role": "user", "content": "x", "tool_call_id": "c1"},
        {"role": "user", "tool_calls": (ToolCall(id="c1", name="read_file"),)},
        {"role": "robot", "content": "x"},
    ],
)
def test_invalid_messages_rejected(kwargs):
    with pytest.raises(ValueError):
        Message(**kwargs)


def test_tool_results_must_answer_pending_calls():
    conversation = Conversation.start("review")
    conversation.append_assistant(_assistant("a", "b"))

    with pytest.raises(ValueError):
        conversation.append_tool_result("zzz", "result")

    conversation.append_tool_result("b", "result b")
    assert [tc.id for tc in conversation.pending_tool_calls()] == ["a"]

    with pytest.raises(ValueError):
        conversation.append_tool_result("b", "again")


def test_next_assistant_turn_requires_all_answers():
    conversation = Conversation.start("review")
    conversation.append_assistant(_assistant("a", "b"))
    conversation.append_tool_result("a", "result a")

    with pytest.raises(ValueError, match="unanswered"):
        conversation.append_assistant(_assistant(content="done"))

    conversation.append_tool_result("b", "result b")
    conversation.append_assistant(_assistant(content="done"))
    assert len(conversation) == 6


def test_results_cannot_answer_older_turns():
    conversation = Conversation.start("review")
    conversation.append_assistant(_assistant("a"))
    conversation.append_tool_result("a", "first")
    conversation.append_assistant(_assistant("b"))

    with pytest.raises(ValueError):
        conversation.append_tool_result("a", "late")


def test_only_assistant_messages_appended_as_turns():
    conversation = Conversation.start("review")

    with pytest.raises(ValueError):
        conversation.append_assistant(Message.user("more"))
