"""Linear flow demo: start → end, then set → add → capture."""

from typing import Any, Dict

from neuralflow import Flow, Node, get_as, require


class StartNode(Node):
    def exec(self, prep_res):  # noqa: D401
        print("Starting workflow...")
        return "started"

    def post(self, shared, prep_res, exec_res):
        return exec_res  # the exec result is the action


class EndNode(Node):
    def prep(self, shared):
        return "Preparing to end workflow"

    def exec(self, prep_res):
        print(f"Ending workflow with: {prep_res}")

    def post(self, shared, prep_res, exec_res):
        shared["end_node_prep_result"] = prep_res


class SetNumberNode(Node):
    def __init__(self, number: int, **kwargs: Any):
        super().__init__(**kwargs)
        self.number = number

    def exec(self, prep_res):
        return self.number * self.param("multiplier", int, 1)

    def post(self, shared, prep_res, exec_res):
        shared["currentValue"] = exec_res
        return "over_20" if exec_res > 20 else None


class AddNumberNode(Node):
    def __init__(self, number: int, **kwargs: Any):
        super().__init__(**kwargs)
        self.number = number

    def prep(self, shared):
        return require(shared, "currentValue", int)

    def exec(self, current: int):
        return current + self.number

    def post(self, shared, prep_res, exec_res):
        shared["currentValue"] = exec_res
        return "added"


class ResultCaptureNode(Node):
    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self.captured: int = -999

    def prep(self, shared):
        return get_as(shared, "currentValue", int, -999)

    def exec(self, value: int):
        self.captured = value
        self.params["capturedValue"] = value


# --------------------------------------------------------------------------- #
# Flows
# --------------------------------------------------------------------------- #

start, end = StartNode(name="start"), EndNode(name="end")
start - "started" >> end
simple_flow = Flow(start, name="Simple Workflow")

set_number = SetNumberNode(10, name="set_number")
add_number = AddNumberNode(5, name="add_number")
capture = ResultCaptureNode(name="capture")
set_number >> add_number
add_number - "added" >> capture
linear_flow = Flow(set_number, name="Linear Workflow")


if __name__ == "__main__":
    ctx: Dict[str, Any] = {}
    simple_flow.run(ctx)
    print(ctx)

    ctx = {}
    linear_flow.run(ctx)
    print(f"currentValue={ctx['currentValue']} captured={capture.captured}")  # 15, 15
