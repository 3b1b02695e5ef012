from __future__ import annotations

"""Graph rendering helpers (no side-effects).

build_rich_tree(flow) returns a Rich *Tree* ready for printing.
to_mermaid(flow) returns a Mermaid ``graph LR`` diagram as text.

Flows may contain cycles: a node that was already rendered shows up as a
back-reference (``↺ name``) instead of being expanded again.
"""
from dataclasses import dataclass
from typing import Any, Optional, Set

from rich.markup import escape

from neuralflow.core.batch import BatchNode
from neuralflow.core.flow import BatchFlow, Flow
from neuralflow.core.graph import FlowGraph
from neuralflow.core.node import BaseNode
from neuralflow.utils.ids import snake_case

__all__ = [
    "RenderOptions",
    "build_rich_tree",
    "to_mermaid",
]

_ICONS = {
    "flow": "🌀 ",
    "batch_flow": "🗂️ ",
    "batch": "📦 ",
    "node": "→ ",
}


@dataclass
class RenderOptions:  # noqa: D101
    icons_on: bool = True
    show_kind: bool = True
    expand_subflows: bool = True


def _icon(node: BaseNode, opts: RenderOptions) -> str:
    if not opts.icons_on:
        return ""
    if isinstance(node, BatchFlow):
        return _ICONS["batch_flow"]
    if isinstance(node, Flow):
        return _ICONS["flow"]
    if isinstance(node, BatchNode):
        return _ICONS["batch"]
    return _ICONS["node"]


def _node_label(node: BaseNode, opts: RenderOptions) -> str:
    label = f"{_icon(node, opts)}[cyan]{escape(node.name)}[/]"
    if opts.show_kind and type(node).__name__ != node.name:
        label += f" [dim]({type(node).__name__})[/]"
    return label


def _edge_label(action: Optional[str]) -> str:
    return "" if action is None else f"[yellow]{escape(action)}[/] ⇒ "


# --------------------------------------------------------------------------- #
# Rich-aware tree builder (import lazily to avoid hard dep at import time)
# --------------------------------------------------------------------------- #

def build_rich_tree(flow: Any, opts: RenderOptions | None = None):  # noqa: D401 – returns rich.tree.Tree
    """Return a *rich.tree.Tree* visualisation of *flow* (side-effect-free)."""
    from rich.tree import Tree  # local import keeps this module lightweight

    opts = opts or RenderOptions()
    tree = Tree(f"[bold]{escape(getattr(flow, 'name', 'Flow'))}[/]")
    start = getattr(flow, "start_node", None)
    if start is None:
        tree.add("[dim]<no start node>[/]")
        return tree

    def _add(parent: "Tree", node: BaseNode, prefix: str, seen: Set[int]):
        if id(node) in seen:
            parent.add(f"{prefix}[magenta]↺ {escape(node.name)}[/]")
            return
        seen.add(id(node))
        branch = parent.add(prefix + _node_label(node, opts))
        if opts.expand_subflows and isinstance(node, Flow) and node.start_node is not None:
            inner = branch.add("[dim]sub-flow[/]")
            _add(inner, node.start_node, "", seen)
        for action, succ in node.successors.items():
            _add(branch, succ, _edge_label(action), seen)

    _add(tree, start, "", set())
    return tree


def _mermaid_text(text: str) -> str:
    # Mermaid entity codes; a raw | or " would end the edge label
    return text.replace("#", "#35;").replace('"', "#quot;").replace("|", "#124;")


def to_mermaid(flow: Any) -> str:
    """Return a Mermaid diagram of the nodes reachable from *flow*'s start."""
    graph = FlowGraph.from_flow(flow)
    lines = ["graph LR"]
    ids = {n.handle: f"n{n.handle}_{snake_case(n.name)}" for n in graph}

    for n in graph:
        display = n.name.replace('"', "'")
        if isinstance(n.ref, Flow):
            lines.append(f'    {ids[n.handle]}[["{display}"]]')
        elif isinstance(n.ref, BatchNode):
            lines.append(f'    {ids[n.handle]}[/"{display}"/]')
        else:
            lines.append(f'    {ids[n.handle]}["{display}"]')

    for e in graph.edges:
        if e.action is None:
            lines.append(f"    {ids[e.src]} --> {ids[e.dst]}")
        else:
            lines.append(f"    {ids[e.src]} -->|{_mermaid_text(e.action)}| {ids[e.dst]}")
    return "\n".join(lines)
