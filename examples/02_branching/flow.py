"""Branching demo: ``over_20`` routes around the adder.

Also the symbol module for ``flow.yml``::

    neuralflow run-yaml examples/02_branching/flow.yml --symbols examples/02_branching/flow.py
"""

from typing import Any

from neuralflow import Flow, Node, get_as, require


class SetNumberNode(Node):
    def __init__(self, number: int = 10, **kwargs: Any):
        super().__init__(**kwargs)
        self.number = number

    def exec(self, prep_res):
        return self.number * self.param("multiplier", int, 1)

    def post(self, shared, prep_res, exec_res):
        shared["currentValue"] = exec_res
        return "over_20" if exec_res > 20 else None


class AddNumberNode(Node):
    def __init__(self, number: int = 5, **kwargs: Any):
        super().__init__(**kwargs)
        self.number = number

    def prep(self, shared):
        return require(shared, "currentValue", int)

    def exec(self, current: int):
        return current + self.number

    def post(self, shared, prep_res, exec_res):
        shared["currentValue"] = exec_res
        return "added"


class CaptureNode(Node):
    def prep(self, shared):
        return get_as(shared, "currentValue", int, -999)

    def exec(self, value: int):
        return value

    def post(self, shared, prep_res, exec_res):
        shared.setdefault("captured_by", []).append(self.name)


set_number = SetNumberNode(10, name="set_number")
add_number = AddNumberNode(5, name="add_number")
capture_small = CaptureNode(name="capture_small")
capture_big = CaptureNode(name="capture_big")

set_number >> add_number
set_number - "over_20" >> capture_big
add_number - "added" >> capture_small

branching_flow = Flow(set_number, name="Branching Workflow")
branching_flow.set_params({"multiplier": 3})  # 30 > 20 → capture_big


if __name__ == "__main__":
    ctx: dict = {}
    branching_flow.run(ctx)
    print(ctx)  # {'currentValue': 30, 'captured_by': ['capture_big']}
