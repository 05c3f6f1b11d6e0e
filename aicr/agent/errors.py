"""
Review Errors
=============

Hard failures that end a review. Anything a tool does wrong is *not* an
exception: it is returned to the model as tool-result text so the model can
recover. Only the conditions below reach the caller of ``Agent.review()``.
"""


class ReviewError(Exception):
    """Base class for failures that abort a review."""


class ModelClientError(ReviewError):
    """The remote call failed or returned something unusable."""


class LoopNotConvergedError(ReviewError):
    """The model was still requesting tools when the round budget ran out."""

    def __init__(self, rounds: int):
        self.rounds = rounds
        super().__init__(f"Review did not converge after {rounds} rounds")


class ReviewTimeoutError(ReviewError):
    """The review deadline expired before the model produced a final answer."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Review timed out after {timeout:g} seconds")
