from __future__ import annotations

"""Flow orchestration for NeuralFlow.

A :class:`Flow` is itself a node: its execute phase walks the sub-graph
hanging off its start node, so flows nest inside larger flows.  Each step
the walk

1. pushes the pass's effective params onto the current node,
2. runs the node's full lifecycle against the shared context,
3. follows the successor registered for the returned action

until no successor matches.  The terminal action becomes the flow's own
action.  :class:`BatchFlow` repeats that walk once per parameter set.
"""

from typing import Any, Dict, List, Mapping, Optional

from .context import SharedState
from .errors import FlowStepLimitExceeded, InvalidConfig, InvalidGraph, SealedMethodMisuse
from .node import BaseNode
from neuralflow.utils.events import (
    FlowFinished,
    FlowStarted,
    NodeFinished,
    NodeStarted,
    Transition,
    publish,
)
from neuralflow.utils.ids import new_run_id
from neuralflow.utils.logging import diagnostic, log

__all__ = ["Flow", "BatchFlow"]

Params = Dict[str, Any]


class Flow(BaseNode):  # noqa: D101
    _sealed = ("exec",)

    def __init__(
        self,
        start: BaseNode | None = None,
        *,
        max_steps: int | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(name=name)
        self.start_node: Optional[BaseNode] = None
        if start is not None:
            self.start(start)
        if max_steps is not None and max_steps < 1:
            raise InvalidConfig(f"max_steps must be at least 1, got {max_steps}")
        self.max_steps = max_steps
        # set per run() call; consumed by the next _run
        self._run_overrides: Params = {}

    # ------------------------------------------------------------------ #
    def start(self, node: BaseNode) -> BaseNode:
        """Set *node* as the entry point of this flow and return it."""
        if node is None:
            raise InvalidGraph(f"start node of {self.name} cannot be None")
        if not isinstance(node, BaseNode):
            raise InvalidGraph(f"start node of {self.name} must be a node, got {type(node).__name__}")
        self.start_node = node
        return node

    def exec(self, prep_res: Any) -> Any:
        raise SealedMethodMisuse(f"{type(self).__name__}.exec() is internal; use run() or nest the flow")

    def post(self, shared: SharedState, prep_res: Any, exec_res: Any) -> Optional[str]:
        return exec_res

    # ------------------------------------------------------------------ #
    # Orchestration
    # ------------------------------------------------------------------ #

    def orchestrate(self, shared: SharedState, params: Mapping[str, Any] | None = None) -> Optional[str]:
        """Walk the graph once with this flow's params overlaid by *params*."""
        if self.start_node is None:
            diagnostic("no_start_node", self.name, f"Flow {self.name} started with no start node.")
            return None

        # fixed for the whole pass
        effective: Params = {**self.params, **(params or {})}
        run_id = new_run_id()
        publish(FlowStarted(flow=self.name, run_id=run_id))
        log.debug("flow %s (%s) starting with params %s", self.name, run_id, effective)

        current: Optional[BaseNode] = self.start_node
        last_action: Optional[str] = None
        steps = 0
        while current is not None:
            if self.max_steps is not None and steps >= self.max_steps:
                raise FlowStepLimitExceeded(self.name, self.max_steps)
            current.set_params(effective)
            publish(NodeStarted(node=current.name, flow=self.name, node_id=id(current)))
            last_action = current._run(shared)
            steps += 1
            publish(NodeFinished(node=current.name, flow=self.name, action=last_action, node_id=id(current)))
            nxt = current.get_next_node(last_action)
            if nxt is not None:
                publish(Transition(flow=self.name, src=current.name, dst=nxt.name, action=last_action))
            current = nxt

        publish(FlowFinished(flow=self.name, run_id=run_id, action=last_action, steps=steps))
        return last_action

    def _orchestrate_exec(self, shared: SharedState) -> Optional[str]:
        overrides, self._run_overrides = self._run_overrides, {}
        return self.orchestrate(shared, overrides)

    def _run(self, shared: SharedState) -> Optional[str]:
        p = self.prep(shared)
        o = self._orchestrate_exec(shared)
        return self.post(shared, p, o)

    def run(self, shared: SharedState, params: Mapping[str, Any] | None = None) -> Optional[str]:
        """Run the flow standalone; *params* override this flow's params for this call."""
        self._run_overrides = dict(params or {})
        try:
            return super().run(shared)
        finally:
            self._run_overrides = {}


class BatchFlow(Flow):
    """Run the sub-graph once per parameter set from :meth:`prep_batch`.

    All passes share one context; their individual terminal actions are
    discarded and :meth:`post_batch` decides the flow's action.
    """

    _sealed = ("post",)

    def prep_batch(self, shared: SharedState) -> List[Mapping[str, Any]]:
        raise NotImplementedError(f"{type(self).__name__} must implement prep_batch()")

    def post_batch(self, shared: SharedState, params_list: List[Mapping[str, Any]]) -> Optional[str]:
        raise NotImplementedError(f"{type(self).__name__} must implement post_batch()")

    def post(self, shared: SharedState, prep_res: Any, exec_res: Any) -> Optional[str]:
        raise SealedMethodMisuse(f"{type(self).__name__}.post() is not used; implement post_batch() instead")

    # ------------------------------------------------------------------ #
    def _run(self, shared: SharedState) -> Optional[str]:
        overrides, self._run_overrides = self._run_overrides, {}
        params_list = list(self.prep_batch(shared) or [])
        if not params_list:
            diagnostic("empty_batch", self.name, f"BatchFlow {self.name} prep_batch returned an empty list.")
        for batch_params in params_list:
            self.orchestrate(shared, {**overrides, **batch_params})
        return self.post_batch(shared, params_list)
