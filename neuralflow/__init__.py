"""NeuralFlow: tiny, embeddable dataflow engine.

Main components:
* `Node`: prep → exec → post unit of work with bounded retries and fallback
* `BatchNode`: per-item retries over an ordered collection
* `Flow`: walks an action-labelled graph of nodes (and is a node itself)
* `BatchFlow`: runs the same graph once per parameter set
"""

# Version info
__version__ = "0.1.0"

# Core components
from neuralflow.core.context import Context, require, get_as
from neuralflow.core.retry import RetryPolicy
from neuralflow.core.node import BaseNode, Node
from neuralflow.core.batch import BatchNode
from neuralflow.core.flow import Flow, BatchFlow
from neuralflow.core.errors import (
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

# Enables `a >> b` and `a - "label" >> b`
from neuralflow.dsl import chain

# Export all important symbols
__all__ = [
    # Core classes
    "Context",
    "RetryPolicy",
    "BaseNode",
    "Node",
    "BatchNode",
    "Flow",
    "BatchFlow",

    # Functions
    "require",
    "get_as",
    "chain",

    # Errors
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
