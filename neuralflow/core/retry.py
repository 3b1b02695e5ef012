from __future__ import annotations
"""Retry configuration shared by :class:`Node` and :class:`BatchNode`.

A ``RetryPolicy`` only decides *how many* attempts a node gets and *how
long* to wait between them.  The waiting itself is done by the sleeper the
node was constructed with (``time.sleep`` unless a test injects its own).
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfig

__all__ = ["RetryPolicy", "build_policy"]


class RetryPolicy(BaseModel):  # noqa: D101 – self-documenting via fields
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: int = Field(1, ge=1, description="total attempts, first one included")
    wait: float = Field(0.0, ge=0, description="seconds between attempts")
    exponential_backoff: bool = False
    max_wait: Optional[float] = Field(None, ge=0)

    # ------------------------------------------------------------------ #
    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed *attempt* (1-based) before the next one."""
        if self.wait <= 0:
            return 0.0
        delay = self.wait * (2 ** (attempt - 1)) if self.exponential_backoff else self.wait
        if self.max_wait is not None:
            delay = min(delay, self.max_wait)
        return float(delay)


def build_policy(policy: Optional[RetryPolicy] = None, **fields: Any) -> RetryPolicy:
    """Return *policy* or a new one from *fields*; bad values raise InvalidConfig."""
    fields = {k: v for k, v in fields.items() if v is not None}
    if policy is not None:
        if fields:
            raise InvalidConfig(f"pass either a RetryPolicy or retry keywords, not both ({sorted(fields)})")
        return policy
    try:
        return RetryPolicy(**fields)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidConfig(f"invalid retry configuration – {problems}") from e
