"""Execution engine: nodes, retry policy, batch nodes and flows."""

from .context import Context, require, get_as
from .errors import (
    NeuralFlowError,
    InvalidConfig,
    InvalidGraph,
    ContextError,
    MissingKeyError,
    WrongKindError,
    RetriesExhausted,
    FallbackFailed,
    SealedMethodMisuse,
    FlowStepLimitExceeded,
)
from .retry import RetryPolicy
from .node import BaseNode, Node
from .batch import BatchNode
from .flow import Flow, BatchFlow

__all__ = [
    "Context",
    "require",
    "get_as",
    "RetryPolicy",
    "BaseNode",
    "Node",
    "BatchNode",
    "Flow",
    "BatchFlow",
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
