"""
Conversation State
==================

The ordered message history of one review: the system prompt, the
caller's request, then alternating assistant turns and tool results.

A Conversation is created fresh for every review and only ever grows.
It enforces the pairing rule the chat-completions API relies on:

    assistant (tool_calls: A, B)
        tool (tool_call_id: A)
        tool (tool_call_id: B)
    assistant ...

Every tool message must answer a still-unanswered call from the most recent
assistant turn, and no new assistant turn may be appended while any of
those calls is unanswered.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["system", "user", "assistant", "tool"]

SYSTEM_PROMPT = """You are an expert code reviewer who is good at finding problems in code and suggesting improvements.

Review focus:
1. Code quality: readability, maintainability, complexity
2. Potential bugs: null dereferences, boundary conditions, concurrency issues
3. Performance: algorithmic efficiency, resource leaks
4. Security: SQL injection, XSS, leaking sensitive information
5. Best practices: naming, error handling, code structure

Available tools:
- get_working_directory: show where relative paths are resolved from
- read_file: read a single file
- read_multiple_files: read several files at once
- list_files: list files in a directory (optionally recursive)
- search_in_files: search files for a keyword
- analyze_directory: summarize a directory and its code files
- get_git_diff: get the current code changes
- run_linter: run a static analysis tool on a file

Workflow:
1. Use analyze_directory or list_files to understand the layout
2. Use read_file or read_multiple_files to read the relevant code
3. Use search_in_files to look for specific patterns (TODO, FIXME, risky calls)
4. Analyze the code carefully and identify problems
5. Give concrete suggestions with example code

Notes:
- When reviewing a directory, analyze it first and then read the key files in batches
- Read at most 10 files per call to stay within the context limit
- Once you have the code, do the analysis yourself and write the review"""


@dataclass(frozen=True)
class ToolCall:
    """
    A model-issued request to invoke a tool.

    Attributes:
        id: Identifier the tool result must echo back
        name: Name of the requested tool
        arguments: JSON-encoded arguments exactly as the model produced them
    """
    id: str
    name: str
    arguments: str = ""

    def to_openai(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class Message:
    """
    One turn in the conversation.

    ``tool_calls`` is only allowed on assistant turns and ``tool_call_id``
    is required on tool turns and forbidden elsewhere.
    """
    role: Role
    content: str | None = None
    tool_calls: tuple[ToolCall, ...] = field(default_factory=tuple)
    tool_call_id: str | None = None

    def __post_init__(self):
        if self.role not in ("system", "user", "assistant", "tool"):
            raise ValueError(f"Unknown message role: {self.role}")
        if self.tool_calls and self.role != "assistant":
            raise ValueError("Only assistant messages may carry tool calls")
        if self.role == "tool" and not self.tool_call_id:
            raise ValueError("Tool messages require a tool_call_id")
        if self.role != "tool" and self.tool_call_id is not None:
            raise ValueError("Only tool messages may carry a tool_call_id")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    def to_openai(self) -> dict[str, Any]:
        """Serialize for the ``messages`` array of a chat-completions request."""
        message: dict[str, Any] = {"role": self.role}
        if self.content is not None:
            message["content"] = self.content
        if self.tool_calls:
            message["tool_calls"] = [tc.to_openai() for tc in self.tool_calls]
        if self.tool_call_id is not None:
            message["tool_call_id"] = self.tool_call_id
        return message


class Conversation:
    """
    Append-only message history for a single review.

    Example:
        conversation = Conversation.start("Please review main.go")
        conversation.append_assistant(reply)
        for call in conversation.pending_tool_calls():
            conversation.append_tool_result(call.id, "...")
    """

    def __init__(self, messages: list[Message] | None = None):
        self._messages: list[Message] = list(messages or [])
        self._answered: set[str] = set()

    @classmethod
    def start(cls, request: str, system_prompt: str = SYSTEM_PROMPT) -> "Conversation":
        """Seed a conversation with the system prompt and the request."""
        return cls([Message.system(system_prompt), Message.user(request)])

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def _last_assistant(self) -> Message | None:
        for message in reversed(self._messages):
            if message.role == "assistant":
                return message
        return None

    def pending_tool_calls(self) -> list[ToolCall]:
        """Calls from the latest assistant turn that have no result yet."""
        last = self._last_assistant()
        if last is None:
            return []
        return [tc for tc in last.tool_calls if tc.id not in self._answered]

    def append_assistant(self, message: Message) -> None:
        """
        Append an assistant turn.

        Raises:
            ValueError: If the message is not an assistant turn, or the
                previous turn still has unanswered tool calls
        """
        if message.role != "assistant":
            raise ValueError(f"Expected an assistant message, got {message.role}")
        pending = self.pending_tool_calls()
        if pending:
            raise ValueError(
                "Previous tool calls are unanswered: "
                + ", ".join(tc.id for tc in pending)
            )
        self._answered = set()
        self._messages.append(message)

    def append_tool_result(self, tool_call_id: str, content: str) -> None:
        """
        Answer one pending tool call.

        Raises:
            ValueError: If the id does not match an unanswered call from the
                latest assistant turn
        """
        if tool_call_id not in {tc.id for tc in self.pending_tool_calls()}:
            raise ValueError(f"No pending tool call with id {tool_call_id!r}")
        self._answered.add(tool_call_id)
        self._messages.append(Message.tool(tool_call_id, content))

    def to_openai_messages(self) -> list[dict[str, Any]]:
        """Serialize every turn for a chat-completions request."""
        return [message.to_openai() for message in self._messages]
