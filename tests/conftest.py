import pytest

from neuralflow import Node
from neuralflow.utils.trace import FlowTrace


class Step(Node):
    """Appends its name to ``shared['visited']`` and returns a fixed action."""

    def __init__(self, action=None, **kw):
        super().__init__(**kw)
        self.action = action

    def exec(self, prep_res):
        return self.name

    def post(self, shared, prep_res, exec_res):
        shared.setdefault("visited", []).append(exec_res)
        return self.action


@pytest.fixture
def trace():
    with FlowTrace() as t:
        yield t


@pytest.fixture
def step():
    return Step
