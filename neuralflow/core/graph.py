from __future__ import annotations
"""Read-only graph snapshot of a flow.

Nodes hold direct references to their successors, which is all the
runtime needs.  Tooling (rendering, validation, the CLI) works on a
``FlowGraph`` instead: every node reachable from the start node gets a
stable integer handle (0 is the start node, then breadth-first order) and
edges become ``(src, action, dst)`` triples over those handles.

Cycles are legal in a flow, so ``find_cycles`` reports them and never
raises.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .node import BaseNode

__all__ = ["GraphNode", "GraphEdge", "FlowGraph"]


@dataclass
class GraphNode:  # noqa: D101 – tiny data holder
    handle: int
    ref: BaseNode  # the actual node object

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def kind(self) -> str:
        return type(self.ref).__name__


@dataclass(frozen=True)
class GraphEdge:  # noqa: D101
    src: int
    action: Optional[str]
    dst: int


@dataclass
class FlowGraph:  # noqa: D101
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    # -------------------------------------------------- #
    @classmethod
    def from_flow(cls, flow) -> "FlowGraph":
        """Snapshot the nodes reachable from *flow*'s start node."""
        start = getattr(flow, "start_node", None)
        if start is None:
            return cls()
        return cls.from_node(start)

    @classmethod
    def from_node(cls, start: BaseNode) -> "FlowGraph":
        graph = cls()
        handles: Dict[int, int] = {}  # id(node) -> handle

        def _handle(node: BaseNode) -> int:
            key = id(node)
            if key not in handles:
                handles[key] = len(graph.nodes)
                graph.nodes.append(GraphNode(handle=handles[key], ref=node))
                queue.append(node)
            return handles[key]

        queue: deque = deque()
        _handle(start)
        while queue:
            node = queue.popleft()
            src = handles[id(node)]
            for action, succ in node.successors.items():
                graph.edges.append(GraphEdge(src, action, _handle(succ)))
        return graph

    # -------------------------------------------------- #
    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, handle: int) -> GraphNode:
        return self.nodes[handle]

    def out_edges(self, handle: int) -> List[GraphEdge]:
        return [e for e in self.edges if e.src == handle]

    def exits(self) -> List[GraphNode]:
        """Nodes without successors – where a walk ends normally."""
        srcs = {e.src for e in self.edges}
        return [n for n in self.nodes if n.handle not in srcs]

    # -------------------------------------------------- #
    def find_cycles(self) -> List[List[int]]:
        """Return each back-edge cycle as a list of handles (simple DFS)."""
        cycles: List[List[int]] = []
        visited: set = set()
        stack: List[int] = []
        on_stack: set = set()

        def _visit(h: int):
            visited.add(h)
            stack.append(h)
            on_stack.add(h)
            for e in self.out_edges(h):
                if e.dst in on_stack:
                    cycles.append(stack[stack.index(e.dst):] + [e.dst])
                elif e.dst not in visited:
                    _visit(e.dst)
            stack.pop()
            on_stack.discard(h)

        for n in self.nodes:
            if n.handle not in visited:
                _visit(n.handle)
        return cycles

    def has_cycles(self) -> bool:
        return bool(self.find_cycles())
