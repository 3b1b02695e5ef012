from __future__ import annotations

"""Node classes for the NeuralFlow execution graph.

``BaseNode`` is the type-erased unit every graph stores: it knows how to run
its own prep → exec → post lifecycle against a shared context and which
successor each action label leads to.  ``Node`` layers the bounded
retry / fallback policy on top.

Authors override ``prep``, ``exec`` and ``post``.  Subclasses that add an
execution policy override the internal ``_exec`` hook instead, so the
lifecycle bookkeeping lives in one place.
"""

import time
from typing import Any, Callable, Dict, Mapping, Optional

from .context import Kind, SharedState, is_kind, require
from .errors import FallbackFailed, InvalidGraph, RetriesExhausted, SealedMethodMisuse
from .result import Result
from .retry import RetryPolicy, build_policy
from neuralflow.utils.events import FallbackInvoked, RetryScheduled, publish
from neuralflow.utils.logging import diagnostic

__all__ = ["BaseNode", "Node", "action_key"]

Sleeper = Callable[[float], None]


def action_key(action: Optional[str]) -> Optional[str]:
    """Normalise *action*: ``None`` and ``""`` both select the default edge."""
    return action or None


def _label(action: Optional[str]) -> str:
    return "<default>" if action is None else f"'{action}'"


class BaseNode:  # noqa: D101
    # Methods named here may not be redefined by subclasses (see __init_subclass__).
    _sealed: tuple = ()

    def __init__(self, *, name: str | None = None) -> None:
        self.name = name or type(self).__name__
        self.params: Dict[str, Any] = {}
        self.successors: Dict[Optional[str], BaseNode] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in cls.__mro__[1:]:
            for attr in base.__dict__.get("_sealed", ()):
                if attr in cls.__dict__:
                    raise SealedMethodMisuse(
                        f"{cls.__name__} must not override {base.__name__}.{attr}()"
                    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    # ------------------------------------------------------------------ #
    # Params
    # ------------------------------------------------------------------ #

    def set_params(self, params: Mapping[str, Any]) -> "BaseNode":
        """Replace this node's params with a copy of *params*."""
        self.params = dict(params)
        return self

    def param(self, key: str, kind: Kind = object, default: Any = None) -> Any:
        """Return param *key* if present and of *kind*, else *default*.

        A value of the wrong kind is reported as a diagnostic, a missing key
        is not.
        """
        if key not in self.params:
            return default
        value = self.params[key]
        if not is_kind(value, kind):
            diagnostic(
                "bad_param_kind",
                self.name,
                f"Param '{key}' of node {self.name} holds {type(value).__name__}, "
                f"expected {getattr(kind, '__name__', kind)}; using default {default!r}",
            )
            return default
        return value

    def require_param(self, key: str, kind: Kind = object) -> Any:
        return require(self.params, key, kind)

    # ------------------------------------------------------------------ #
    # Wiring
    # ------------------------------------------------------------------ #

    def next(self, node: "BaseNode", action: Optional[str] = None) -> "BaseNode":
        """Route *action* (default edge when None) to *node*; return *node*."""
        if node is None:
            raise InvalidGraph(f"successor of {self.name} cannot be None")
        if not isinstance(node, BaseNode):
            raise InvalidGraph(f"successor of {self.name} must be a node, got {type(node).__name__}")
        key = action_key(action)
        if key in self.successors:
            diagnostic(
                "successor_overwritten",
                self.name,
                f"Overwriting successor for action {_label(key)} in node {self.name} "
                f"({self.successors[key].name} -> {node.name})",
            )
        self.successors[key] = node
        return node

    def get_next_node(self, action: Optional[str]) -> Optional["BaseNode"]:
        """Return the successor for *action* exactly; no fallback to the default edge."""
        key = action_key(action)
        nxt = self.successors.get(key)
        if nxt is None and self.successors:
            available = ", ".join(_label(k) for k in self.successors)
            diagnostic(
                "dangling_action",
                self.name,
                f"Flow might end: action {_label(key)} not found in successors [{available}] "
                f"of node {self.name}",
            )
        return nxt

    # ------------------------------------------------------------------ #
    # Lifecycle hooks (override in subclasses)
    # ------------------------------------------------------------------ #

    def prep(self, shared: SharedState) -> Any:
        return None

    def exec(self, prep_res: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__} must implement exec()")

    def post(self, shared: SharedState, prep_res: Any, exec_res: Any) -> Optional[str]:
        return None

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def _exec(self, prep_res: Any) -> Any:
        return self.exec(prep_res)

    def _run(self, shared: SharedState) -> Optional[str]:
        p = self.prep(shared)
        e = self._exec(p)
        return self.post(shared, p, e)

    def run(self, shared: SharedState) -> Optional[str]:
        """Run the lifecycle once, ignoring successors; return the action."""
        if self.successors:
            diagnostic(
                "standalone_with_successors",
                self.name,
                f"Node {self.name} has successors, but run() was called. "
                "Successors won't be executed. Use Flow.",
            )
        return self._run(shared)


class Node(BaseNode):
    """Node whose ``exec`` is retried up to ``max_retries`` times.

    After the last failed attempt ``exec_fallback(prep_res, exc)`` decides the
    result.  The default fallback raises :class:`RetriesExhausted`; any other
    error raised by a fallback surfaces as :class:`FallbackFailed`.
    """

    def __init__(
        self,
        max_retries: int | None = None,
        wait: float | None = None,
        *,
        exponential_backoff: bool | None = None,
        max_wait: float | None = None,
        policy: RetryPolicy | None = None,
        sleep: Sleeper = time.sleep,
        name: str | None = None,
    ) -> None:
        super().__init__(name=name)
        self.policy = build_policy(
            policy,
            max_retries=max_retries,
            wait=wait,
            exponential_backoff=exponential_backoff,
            max_wait=max_wait,
        )
        self.sleep = sleep
        self.cur_retry = 0  # 0-based index of the attempt in progress

    @property
    def max_retries(self) -> int:
        return self.policy.max_retries

    @property
    def wait(self) -> float:
        return self.policy.wait

    # ------------------------------------------------------------------ #
    def exec_fallback(self, prep_res: Any, exc: Exception) -> Any:
        raise RetriesExhausted(self.name, self.max_retries, exc) from exc

    def _exec(self, prep_res: Any) -> Any:
        result = self._attempt(self.exec, prep_res)
        return self._recover(result, self.exec_fallback, prep_res, default=Node.exec_fallback)

    # ------------------------------------------------------------------ #
    # Retry bookkeeping shared with BatchNode
    # ------------------------------------------------------------------ #

    def _attempt(self, fn: Callable[[Any], Any], arg: Any, item: int | None = None) -> Result:
        """Call ``fn(arg)`` until it succeeds or the attempt budget is spent."""
        last: Optional[Exception] = None
        for i in range(self.max_retries):
            self.cur_retry = i
            try:
                return Result.success(fn(arg), attempts=i + 1)
            except NotImplementedError:
                # a missing hook is an authoring error, not a transient failure
                raise
            except Exception as e:  # noqa: BLE001 – every failure counts as an attempt
                last = e
                if i + 1 < self.max_retries:
                    delay = self.policy.delay_for(i + 1)
                    publish(
                        RetryScheduled(
                            node=self.name,
                            attempt=i + 1,
                            delay=delay,
                            error=repr(e),
                            item=item,
                            node_id=id(self),
                        )
                    )
                    if delay > 0:
                        self.sleep(delay)
        return Result.failure(last, attempts=self.max_retries)  # type: ignore[arg-type]

    def _recover(
        self,
        result: Result,
        fallback: Callable[[Any, Exception], Any],
        arg: Any,
        item: int | None = None,
        default: Callable[..., Any] | None = None,
    ) -> Any:
        """Return the result value, or what *fallback* makes of the last error.

        Only the built-in *default* fallback may let ``RetriesExhausted``
        through; anything a user fallback raises becomes ``FallbackFailed``.
        """
        if result.ok:
            return result.value
        publish(
            FallbackInvoked(
                node=self.name,
                attempts=result.attempts,
                error=repr(result.error),
                item=item,
                node_id=id(self),
            )
        )
        is_default = default is not None and getattr(fallback, "__func__", None) is default
        try:
            return fallback(arg, result.error)  # type: ignore[arg-type]
        except RetriesExhausted as e:
            if is_default:
                raise
            raise FallbackFailed(self.name, result.error, e) from e
        except Exception as e:  # noqa: BLE001
            raise FallbackFailed(self.name, result.error, e) from e
