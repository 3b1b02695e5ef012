from __future__ import annotations
"""BatchNode – per-item retry / fallback over an ordered collection.

``prep`` returns the items, ``exec_item`` handles one of them.  Each item
gets its own attempt budget and fallback, so a failing item never costs its
neighbours extra attempts.  A fallback that raises still aborts the batch.
"""
from typing import Any, List, Sequence

from .errors import SealedMethodMisuse, RetriesExhausted
from .node import Node

__all__ = ["BatchNode"]


class BatchNode(Node):  # noqa: D101
    _sealed = ("exec", "exec_fallback")

    # Methods for subclasses to implement ------------------------------ #

    def exec_item(self, item: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__} must implement exec_item()")

    def exec_item_fallback(self, item: Any, exc: Exception) -> Any:
        raise RetriesExhausted(f"{self.name} item {item!r}", self.max_retries, exc) from exc

    # Whole-batch hooks only exist to satisfy the Node interface ------- #

    def exec(self, prep_res: Any) -> Any:
        raise SealedMethodMisuse(f"{type(self).__name__}.exec() is internal; implement exec_item() instead")

    def exec_fallback(self, prep_res: Any, exc: Exception) -> Any:
        raise SealedMethodMisuse(
            f"{type(self).__name__}.exec_fallback() is internal; implement exec_item_fallback() instead"
        )

    # ------------------------------------------------------------------ #
    def _exec(self, items: Sequence[Any] | None) -> List[Any]:
        if not items:
            return []
        results: List[Any] = []
        for idx, item in enumerate(items):
            outcome = self._attempt(self.exec_item, item, item=idx)
            results.append(
                self._recover(outcome, self.exec_item_fallback, item, item=idx, default=BatchNode.exec_item_fallback)
            )
        return results
