from __future__ import annotations
"""Logging setup and the diagnostics channel.

Plain log messages go through the ``neuralflow`` logger, rendered by a
Rich handler.  Engine diagnostics (overwritten edges, dangling actions,
empty batches…) are logged as warnings *and* published as
:class:`~neuralflow.utils.events.Diagnostic` events so tools and tests can
observe them without scraping log output.
"""
from logging import Logger, getLogger, INFO, DEBUG, WARNING, ERROR, basicConfig
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from neuralflow.utils.events import Diagnostic, publish

console = Console()

__all__ = [
    "console",
    "log",
    "get",
    "diagnostic",
    "show_flow_tree",
]

_LEVEL_MAP = {
    "info": INFO,
    "debug": DEBUG,
    "warning": WARNING,
    "error": ERROR,
}

# Configure root once with Rich handler for plain log messages
basicConfig(
    level=INFO,
    format="%(message)s",
    datefmt="%H:%M:%S",
    handlers=[RichHandler(rich_tracebacks=True, markup=False, console=console)],
)

log: Logger = getLogger("neuralflow")


def get(level: str = "info") -> Logger:  # noqa: D401
    """Return the neuralflow logger set to *level* (str)."""
    lvl = _LEVEL_MAP.get(level.lower(), INFO)
    lg = getLogger("neuralflow")
    lg.setLevel(lvl)
    return lg


def diagnostic(kind: str, node: str, message: str) -> None:
    """Emit a non-fatal engine warning on both the logger and the event bus."""
    log.warning("%s", message)
    publish(Diagnostic(kind=kind, node=node, message=message))


def show_flow_tree(flow: Any) -> None:  # noqa: D401
    """Print the successor tree of *flow* to the shared console."""
    from neuralflow.utils.dag import build_rich_tree  # avoid import cycle with core

    console.print(build_rich_tree(flow))
