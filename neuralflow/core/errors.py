from __future__ import annotations
"""Exception hierarchy for NeuralFlow.

Every error raised by the engine derives from :class:`NeuralFlowError`, so
callers can catch the whole family at once.  Wrapping errors keep the
underlying failure attached via ``raise ... from ...``.
"""
from typing import Any, Optional

__all__ = [
    "NeuralFlowError",
    "InvalidConfig",
    "InvalidGraph",
    "ContextError",
    "MissingKeyError",
    "WrongKindError",
    "RetriesExhausted",
    "FallbackFailed",
    "SealedMethodMisuse",
    "FlowStepLimitExceeded",
]


class NeuralFlowError(Exception):  # noqa: D101
    pass


class InvalidConfig(NeuralFlowError, ValueError):
    """Bad constructor arguments (attempt count, delays…)."""


class InvalidGraph(NeuralFlowError, ValueError):
    """Graph wiring error: missing start node, null successor, unknown symbol."""


# --------------------------------------------------------------------------- #
# Context access
# --------------------------------------------------------------------------- #


class ContextError(NeuralFlowError, KeyError):
    """A context or params key is absent or holds a value of the wrong kind."""

    def __init__(self, key: str, message: str):
        super().__init__(message)
        self.key = key
        self.message = message

    def __str__(self) -> str:  # KeyError would repr() the message
        return self.message


class MissingKeyError(ContextError):  # noqa: D101
    def __init__(self, key: str):
        super().__init__(key, f"missing key '{key}'")


class WrongKindError(ContextError):  # noqa: D101
    def __init__(self, key: str, expected: Any, actual: Any):
        exp = getattr(expected, "__name__", str(expected))
        act = type(actual).__name__
        super().__init__(key, f"key '{key}' holds {act}, expected {exp}")
        self.expected = expected
        self.actual = actual


# --------------------------------------------------------------------------- #
# Execution
# --------------------------------------------------------------------------- #


class RetriesExhausted(NeuralFlowError):
    """All attempts failed and no fallback recovered the result."""

    def __init__(self, node: str, attempts: int, last_error: BaseException):
        super().__init__(
            f"{node} failed after {attempts} attempt(s): "
            f"{type(last_error).__name__}: {last_error}"
        )
        self.node = node
        self.attempts = attempts
        self.last_error = last_error


class FallbackFailed(NeuralFlowError):
    """The fallback hook raised; its error is chained as ``__cause__``."""

    def __init__(self, node: str, original_error: Optional[BaseException], fallback_error: BaseException):
        super().__init__(
            f"fallback of {node} failed with {type(fallback_error).__name__}: {fallback_error} "
            f"(original failure: {original_error!r})"
        )
        self.node = node
        self.original_error = original_error
        self.fallback_error = fallback_error


class SealedMethodMisuse(NeuralFlowError, TypeError):
    """A sealed entry point was called directly or overridden in a subclass."""


class FlowStepLimitExceeded(NeuralFlowError):  # noqa: D101
    def __init__(self, flow: str, max_steps: int):
        super().__init__(f"{flow} exceeded max_steps={max_steps} in a single pass")
        self.flow = flow
        self.max_steps = max_steps
