from __future__ import annotations
"""Ultra-lightweight pub/sub **EventBus** used by the flow runtime.

Example
-------
```python
from neuralflow.utils.events import subscribe, publish, RetryScheduled

@subscribe(RetryScheduled)
def _on_retry(evt: RetryScheduled):
    print(f"{evt.node}: attempt {evt.attempt} failed, waiting {evt.delay}s")
```
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

__all__ = [
    "Event",
    "FlowStarted",
    "FlowFinished",
    "NodeStarted",
    "NodeFinished",
    "RetryScheduled",
    "FallbackInvoked",
    "Transition",
    "Diagnostic",
    "subscribe",
    "unsubscribe",
    "publish",
]

T = TypeVar("T", bound="Event")
_Handler = Callable[[Any], None]
_REGISTRY: Dict[Type["Event"], List[_Handler]] = {}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, kw_only=True)
class Event:  # noqa: D101 – base event
    ts: datetime = field(default_factory=_now)


# --------------------------------------------------------------------------- #
# Concrete events
# --------------------------------------------------------------------------- #
@dataclass(slots=True)
class FlowStarted(Event):
    flow: str
    run_id: str


@dataclass(slots=True)
class FlowFinished(Event):
    flow: str
    run_id: str
    action: Optional[str]
    steps: int  # nodes executed during the pass


@dataclass(slots=True)
class NodeStarted(Event):
    node: str
    flow: str
    node_id: Optional[int] = None  # id() of the node object


@dataclass(slots=True)
class NodeFinished(Event):
    node: str
    flow: str
    action: Optional[str]
    node_id: Optional[int] = None


@dataclass(slots=True)
class RetryScheduled(Event):
    node: str
    attempt: int  # the attempt that just failed (1-based)
    delay: float
    error: str
    item: Optional[int] = None  # batch item index, if any
    node_id: Optional[int] = None


@dataclass(slots=True)
class FallbackInvoked(Event):
    node: str
    attempts: int
    error: str
    item: Optional[int] = None
    node_id: Optional[int] = None


@dataclass(slots=True)
class Transition(Event):
    flow: str
    src: str
    dst: str
    action: Optional[str]


@dataclass(slots=True)
class Diagnostic(Event):
    """Human-readable warning that never alters control flow."""

    kind: str
    node: str
    message: str


# --------------------------------------------------------------------------- #
# API helpers
# --------------------------------------------------------------------------- #

def subscribe(event_type: Type[T]):  # noqa: D401
    """Decorator: register *func* to receive *event_type* events."""

    def _decorator(func: _Handler) -> _Handler:
        _REGISTRY.setdefault(event_type, []).append(func)
        return func

    return _decorator


def unsubscribe(event_type: Type[T], func: _Handler) -> None:
    handlers = _REGISTRY.get(event_type, [])
    if func in handlers:
        handlers.remove(func)


def publish(evt: Event) -> None:  # noqa: D401
    """Publish an event to all registered subscribers."""
    for func in list(_REGISTRY.get(type(evt), [])):
        try:
            func(evt)
        except Exception as e:  # noqa: BLE001
            # Failure to handle an event must never crash the running flow.
            from neuralflow.utils.logging import log

            log.warning("event handler %s failed: %s", getattr(func, "__name__", func), e)
