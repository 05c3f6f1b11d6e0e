"""
Agent Core
==========

The review agent: drives a multi-turn conversation between the remote model
and the local review tools until the model writes its review.

Agent Loop:
    Request
       │
       ▼
    Conversation = [system prompt, request]
       │
       ▼
    Model call with tools  ◄──────────────┐
       │                                  │
       ▼                                  │
    ┌─── Has tool calls? ───┐             │
    │                       │             │
    No                      Yes           │
    │                       │             │
    ▼                       ▼             │
    Return content     Run each tool,     │
                       append results ────┘

The loop stops after ``max_rounds`` model calls. Only two kinds of failure
reach the caller: the model call itself failing (ModelClientError) and the
round budget running out (LoopNotConvergedError). Tool failures are written
into the conversation as tool results for the model to deal with.
"""

import asyncio
from dataclasses import dataclass

from aicr.agent.context import SYSTEM_PROMPT, Conversation
from aicr.agent.errors import LoopNotConvergedError, ReviewTimeoutError
from aicr.agent.model_client import ModelClient
from aicr.agent.tools_executor import ParsedToolCall, ToolCallResult, ToolExecutor
from aicr.utils.config import Config, get_config
from aicr.utils.logger import Logger

logger = Logger("Agent")


@dataclass
class ReviewResult:
    """
    Outcome of a successful review.

    Attributes:
        text: The model's final answer
        rounds: Number of model calls made
        conversation: The full history, for inspection and debugging
    """
    text: str
    rounds: int
    conversation: Conversation


class Agent:
    """
    Code review agent.

    The agent holds no per-review state, so one instance can serve any
    number of concurrent reviews.

    Example:
        agent = Agent.from_config()

        review = await agent.review("Please review the file: main.go")
        print(review)
    """

    # Upper bound on model calls per review
    DEFAULT_MAX_ROUNDS = 100

    def __init__(
        self,
        model_client: ModelClient,
        tool_executor: ToolExecutor | None = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        review_timeout: float | None = None,
        system_prompt: str = SYSTEM_PROMPT
    ):
        """
        Initialize the agent.

        Args:
            model_client: Client for the chat-completions endpoint
            tool_executor: Executor for the review tools
            max_rounds: Maximum model calls per review
            review_timeout: Default deadline in seconds for a review, None for no deadline
            system_prompt: Instructions sent as the first message
        """
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")

        self.model_client = model_client
        self.tool_executor = tool_executor or ToolExecutor()
        self.max_rounds = max_rounds
        self.review_timeout = review_timeout
        self.system_prompt = system_prompt

    @classmethod
    def from_config(cls, config: Config | None = None) -> "Agent":
        """Build an agent from environment configuration."""
        config = config or get_config()
        agent = cls(
            model_client=ModelClient.from_config(config),
            max_rounds=config.agent.max_rounds,
            review_timeout=config.agent.review_timeout,
        )
        logger.info(f"Agent initialized with model: {config.model.name}")
        return agent

    async def review(self, request: str, timeout: float | None = None) -> str:
        """
        Review code and return the review text.

        Args:
            request: Free-text description of what to review
            timeout: Deadline in seconds, overriding the agent default

        Raises:
            ModelClientError: If a model call fails
            LoopNotConvergedError: If the round budget is exhausted
            ReviewTimeoutError: If the deadline expires
        """
        result = await self.run(request, timeout=timeout)
        return result.text

    async def run(self, request: str, timeout: float | None = None) -> ReviewResult:
        """Like review(), but returns the round count and conversation too."""
        timeout = timeout if timeout is not None else self.review_timeout
        if timeout is None:
            return await self._run_loop(request)

        try:
            async with asyncio.timeout(timeout):
                return await self._run_loop(request)
        except TimeoutError:
            logger.error(f"Review timed out after {timeout:g}s")
            raise ReviewTimeoutError(timeout) from None

    async def _run_loop(self, request: str) -> ReviewResult:
        logger.info(f"Starting review: {request[:80]}")

        conversation = Conversation.start(request, self.system_prompt)
        tools = self.tool_executor.tool_descriptors()
        previous_requests = None

        for round_number in range(1, self.max_rounds + 1):
            reply = await self.model_client.complete(conversation.to_openai_messages(), tools)
            message = reply.message

            logger.info(
                f"[Round {round_number}] finish_reason={reply.finish_reason}, "
                f"tool_calls={len(message.tool_calls)}"
            )

            conversation.append_assistant(message)

            if not message.tool_calls:
                text = message.content or ""
                logger.info(f"Review finished after {round_number} round(s) ({len(text)} chars)")
                return ReviewResult(text=text, rounds=round_number, conversation=conversation)

            requests = [(tc.name, tc.arguments) for tc in message.tool_calls]
            if requests == previous_requests:
                logger.warning("Model repeated the previous tool requests")
            previous_requests = requests

            for tool_call in self.tool_executor.parse_tool_calls(message):
                outcome = await self._execute_to_completion(tool_call)
                conversation.append_tool_result(outcome.tool_call_id, outcome.content)

        logger.error(f"Reached max rounds ({self.max_rounds}) without a final answer")
        raise LoopNotConvergedError(self.max_rounds)

    async def _execute_to_completion(self, tool_call: ParsedToolCall) -> ToolCallResult:
        """
        Run one tool call that cannot be interrupted once dispatched.

        If the review is cancelled meanwhile, the tool still finishes before
        the cancellation propagates, so the caller never returns with a tool
        half-way through its work.
        """
        task = asyncio.ensure_future(self.tool_executor.execute_one(tool_call))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            logger.warning(f"Review cancelled, waiting for {tool_call.name} to finish")
            await asyncio.wait({task})
            raise
