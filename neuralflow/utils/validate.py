from __future__ import annotations
"""Static checks for NeuralFlow graphs (missing hooks, cycles, empty flows…)."""
from typing import List, NamedTuple

from neuralflow.core.batch import BatchNode
from neuralflow.core.flow import BatchFlow, Flow
from neuralflow.core.graph import FlowGraph
from neuralflow.core.node import BaseNode

__all__ = ["validate_flow", "Issue"]


class Issue(NamedTuple):  # noqa: D101
    level: str  # "error" | "warning"
    node: str
    message: str


def _missing_hook(node: BaseNode) -> str | None:
    cls = type(node)
    if isinstance(node, BatchFlow):
        if cls.prep_batch is BatchFlow.prep_batch or cls.post_batch is BatchFlow.post_batch:
            return "BatchFlow must implement prep_batch() and post_batch()"
        return None
    if isinstance(node, Flow):
        return None
    if isinstance(node, BatchNode):
        if cls.exec_item is BatchNode.exec_item:
            return "BatchNode must implement exec_item()"
        return None
    if cls.exec is BaseNode.exec:
        return "node must implement exec()"
    return None


def validate_flow(flow: Flow) -> List[Issue]:  # noqa: D401
    """Return the problems found in *flow* and every flow nested inside it."""
    issues: List[Issue] = []
    _check_flow(flow, issues, set())
    return issues


def _check_flow(flow: Flow, issues: List[Issue], seen_flows: set) -> None:
    if id(flow) in seen_flows:
        return
    seen_flows.add(id(flow))

    hook = _missing_hook(flow)
    if hook:
        issues.append(Issue("error", flow.name, hook))

    if flow.start_node is None:
        issues.append(Issue("error", flow.name, "flow has no start node"))
        return

    graph = FlowGraph.from_flow(flow)
    for gn in graph:
        hook = _missing_hook(gn.ref)
        if hook and not isinstance(gn.ref, Flow):
            issues.append(Issue("error", gn.name, hook))
        if isinstance(gn.ref, Flow):
            _check_flow(gn.ref, issues, seen_flows)

    for cycle in graph.find_cycles():
        path = " -> ".join(graph.node(h).name for h in cycle)
        guard = "" if flow.max_steps is not None else "; no max_steps guard set"
        issues.append(Issue("warning", flow.name, f"cycle {path}{guard}"))
