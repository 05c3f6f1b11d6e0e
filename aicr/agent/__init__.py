"""
Agent System
============

The review agent and its collaborators:
- Agent: runs the tool-calling loop for one review request
- Conversation: the message history of a review
- ModelClient: the chat-completions call
- ToolExecutor: runs the tools the model asks for
"""

from aicr.agent.context import Conversation, Message, ToolCall
from aicr.agent.core import Agent, ReviewResult
from aicr.agent.errors import (
    LoopNotConvergedError,
    ModelClientError,
    ReviewError,
    ReviewTimeoutError,
)
from aicr.agent.model_client import ModelClient, ModelReply
from aicr.agent.tools_executor import ToolExecutor

__all__ = [
    "Agent",
    "Conversation",
    "LoopNotConvergedError",
    "Message",
    "ModelClient",
    "ModelClientError",
    "ModelReply",
    "ReviewError",
    "ReviewResult",
    "ReviewTimeoutError",
    "ToolCall",
    "ToolExecutor",
]
