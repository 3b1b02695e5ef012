from __future__ import annotations

"""neuralflow.utils.ids
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Identifier helpers: run ids for lifecycle events and identifier-safe node
names for rendered diagrams.
"""

import re
import uuid
from datetime import datetime

__all__ = ["snake_case", "new_run_id"]

_PATTERN = re.compile(r"[^a-zA-Z0-9]+")


def snake_case(text: str) -> str:  # noqa: D401
    """Return *text* as a lower-case identifier (``"Add Number" -> "add_number"``)."""
    s = _PATTERN.sub("_", text)
    s = re.sub(r"_+", "_", s)
    return s.strip("_").lower() or "node"


def new_run_id() -> str:
    """Return ``YYYYMMDD-HHMMSS-xxxxxxxx`` (timestamp + 8 hex chars of a UUID4)."""
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return f"{timestamp}-{uuid.uuid4().hex[:8]}"
