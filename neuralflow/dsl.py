from __future__ import annotations
"""Fluent operator-based wiring DSL.

Example::

    load >> score                 # default edge
    score - "over_20" >> big      # labelled edge
    score >> small
    flow = Flow(load)

``chain(a, b, c)`` wires a default-edge sequence and returns ``a``.
"""
from typing import Optional

from neuralflow.core.errors import InvalidGraph
from neuralflow.core.node import BaseNode

__all__ = ["chain", "ConditionalTransition"]


class ConditionalTransition:  # noqa: D401 – tiny helper
    """Pending ``node - "action"`` edge waiting for its target."""

    def __init__(self, src: BaseNode, action: Optional[str]):
        self.src = src
        self.action = action

    def __rshift__(self, target: BaseNode) -> BaseNode:
        return self.src.next(target, self.action)

    def __repr__(self) -> str:
        return f"<ConditionalTransition {self.src.name} -{self.action!r}->>"


def chain(*nodes: BaseNode) -> BaseNode:  # noqa: D401
    """Connect *nodes* left to right on the default edge; return the first."""
    if not nodes:
        raise InvalidGraph("chain() needs at least one node")
    for src, dst in zip(nodes, nodes[1:]):
        src.next(dst)
    return nodes[0]


# --------------------------------------------------------------------------- #
# Patch BaseNode to enable `a >> b` and `a - "label" >> b` out of the box.
# This keeps the API additive – `node.next(...)` still works.
# --------------------------------------------------------------------------- #

def _node_rshift(self: BaseNode, other: BaseNode) -> BaseNode:
    return self.next(other)


def _node_sub(self: BaseNode, action: str) -> ConditionalTransition:
    if not isinstance(action, str):
        raise TypeError(f"action label must be a string, got {type(action).__name__}")
    return ConditionalTransition(self, action)


# Attach only once
if not hasattr(BaseNode, "__rshift__"):
    setattr(BaseNode, "__rshift__", _node_rshift)
    setattr(BaseNode, "__sub__", _node_sub)
