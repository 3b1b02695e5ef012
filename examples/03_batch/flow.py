"""Batch demo: per-item retries inside a BatchNode, one pass per file in a BatchFlow."""

import random
from typing import Any, Dict, List

from neuralflow import BatchFlow, BatchNode, Node


class FlakyUppercase(BatchNode):
    """Upper-cases every line; each line fails at random and is retried."""

    def prep(self, shared):
        return shared["documents"][self.param("doc", str)]

    def exec_item(self, line: str) -> str:
        if random.random() < 0.3:
            raise RuntimeError(f"transient failure on {line!r}")
        return line.upper()

    def exec_item_fallback(self, line: str, exc: Exception) -> str:
        return f"<unprocessed: {line}>"

    def post(self, shared, prep_res, exec_res):
        shared.setdefault("processed", {})[self.param("doc", str)] = exec_res


class CountLines(Node):
    def prep(self, shared):
        return shared["processed"][self.param("doc", str)]

    def exec(self, lines: List[str]) -> int:
        return len(lines)

    def post(self, shared, prep_res, exec_res):
        shared["total_lines"] = shared.get("total_lines", 0) + exec_res


class PerDocument(BatchFlow):
    def prep_batch(self, shared) -> List[Dict[str, Any]]:
        return [{"doc": name} for name in sorted(shared["documents"])]

    def post_batch(self, shared, params_list):
        shared["documents_done"] = len(params_list)
        return "done"


upper = FlakyUppercase(max_retries=3, wait=0.01, name="uppercase")
upper >> CountLines(name="count_lines")
batch_flow = PerDocument(upper, name="Per-document batch")


if __name__ == "__main__":
    ctx = {"documents": {"a.txt": ["hello", "world"], "b.txt": ["neural", "flow", "engine"]}}
    print(batch_flow.run(ctx), ctx["processed"], ctx["total_lines"])
