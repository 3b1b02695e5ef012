from __future__ import annotations
"""Run tracer built on the event bus.

``FlowTrace`` subscribes to the lifecycle events while attached and keeps
one row per node visit::

    with FlowTrace() as trace:
        flow.run(ctx)
    console.print(trace.render())
"""
from dataclasses import dataclass
from typing import List, Optional

from rich.table import Table

from neuralflow.utils.events import (
    Diagnostic,
    Event,
    FallbackInvoked,
    FlowFinished,
    FlowStarted,
    NodeFinished,
    NodeStarted,
    RetryScheduled,
    Transition,
    subscribe,
    unsubscribe,
)

__all__ = ["FlowTrace", "NodeVisit"]

_TRACKED = (
    FlowStarted,
    FlowFinished,
    NodeStarted,
    NodeFinished,
    RetryScheduled,
    FallbackInvoked,
    Transition,
    Diagnostic,
)


@dataclass
class NodeVisit:  # noqa: D101
    step: int
    node: str
    flow: str
    retries: int = 0
    fallbacks: int = 0
    action: Optional[str] = None
    finished: bool = False
    node_id: Optional[int] = None


class FlowTrace:  # noqa: D101
    def __init__(self) -> None:
        self.events: List[Event] = []
        self.visits: List[NodeVisit] = []
        self._open: List[NodeVisit] = []  # visits still running (nested flows stack up)
        self._attached = False

    # ------------------------------------------------------------------ #
    def attach(self) -> "FlowTrace":
        if not self._attached:
            for evt_type in _TRACKED:
                subscribe(evt_type)(self._record)
            self._attached = True
        return self

    def detach(self) -> None:
        if self._attached:
            for evt_type in _TRACKED:
                unsubscribe(evt_type, self._record)
            self._attached = False

    def __enter__(self) -> "FlowTrace":
        return self.attach()

    def __exit__(self, *exc) -> None:
        self.detach()

    # ------------------------------------------------------------------ #
    def _visit_for(self, node: str, node_id: Optional[int] = None) -> Optional[NodeVisit]:
        """Innermost open visit of the node object, by name when no id was sent."""
        for visit in reversed(self._open):
            if node_id is not None and visit.node_id is not None:
                if visit.node_id == node_id:
                    return visit
            elif visit.node == node:
                return visit
        return None

    def _record(self, evt: Event) -> None:
        self.events.append(evt)
        if isinstance(evt, NodeStarted):
            visit = NodeVisit(step=len(self.visits) + 1, node=evt.node, flow=evt.flow, node_id=evt.node_id)
            self.visits.append(visit)
            self._open.append(visit)
        elif isinstance(evt, NodeFinished):
            visit = self._visit_for(evt.node, evt.node_id)
            if visit is not None:
                visit.action = evt.action
                visit.finished = True
                self._open.remove(visit)
        elif isinstance(evt, RetryScheduled):
            visit = self._visit_for(evt.node, evt.node_id)
            if visit is not None:
                visit.retries += 1
        elif isinstance(evt, FallbackInvoked):
            visit = self._visit_for(evt.node, evt.node_id)
            if visit is not None:
                visit.fallbacks += 1

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def execution_order(self) -> List[str]:
        return [v.node for v in self.visits]

    def diagnostics(self, kind: str | None = None) -> List[Diagnostic]:
        return [
            e for e in self.events
            if isinstance(e, Diagnostic) and (kind is None or e.kind == kind)
        ]

    def transitions(self) -> List[Transition]:
        return [e for e in self.events if isinstance(e, Transition)]

    # ------------------------------------------------------------------ #
    def render(self, title: str = "Flow trace") -> Table:
        """Return a Rich table with one row per node visit."""
        table = Table(title=title)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Node", style="cyan", no_wrap=True)
        table.add_column("Flow", style="magenta")
        table.add_column("Retries", justify="right", style="yellow")
        table.add_column("Fallbacks", justify="right", style="red")
        table.add_column("Action", style="green")
        for v in self.visits:
            action = "<default>" if v.action is None else v.action
            if not v.finished:
                action = "[bold red]failed[/]"
            table.add_row(str(v.step), v.node, v.flow, str(v.retries), str(v.fallbacks), action)
        return table
