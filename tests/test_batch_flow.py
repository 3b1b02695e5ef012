import pytest

from neuralflow import BatchFlow, Node, SealedMethodMisuse


class Record(Node):
    def exec(self, prep_res):
        return self.param("item")

    def post(self, shared, prep_res, exec_res):
        shared.setdefault("seen", []).append((exec_res, self.param("tag")))
        return f"pass-{exec_res}"


class Items(BatchFlow):
    def __init__(self, start, items, **kw):
        super().__init__(start, **kw)
        self.items = items
        self.post_calls = []

    def prep_batch(self, shared):
        return [{"item": i} for i in self.items]

    def post_batch(self, shared, params_list):
        self.post_calls.append(list(params_list))
        return "batch_done"


def test_one_pass_per_param_set():
    flow = Items(Record(), [1, 2, 3])
    flow.set_params({"tag": "base"})
    shared = {}
    assert flow.run(shared) == "batch_done"
    assert shared["seen"] == [(1, "base"), (2, "base"), (3, "base")]
    assert flow.post_calls == [[{"item": 1}, {"item": 2}, {"item": 3}]]


def test_batch_params_win_over_flow_params():
    flow = Items(Record(), [7])
    flow.set_params({"item": 0, "tag": "base"})
    shared = {}
    flow.run(shared)
    assert shared["seen"] == [(7, "base")]


def test_run_overrides_reach_every_pass():
    flow = Items(Record(), [1, 2])
    shared = {}
    flow.run(shared, params={"tag": "override"})
    assert [tag for _, tag in shared["seen"]] == ["override", "override"]


def test_empty_batch_still_calls_post_batch(trace):
    record = Record()
    flow = Items(record, [], name="nothing")
    shared = {}
    assert flow.run(shared) == "batch_done"
    assert flow.post_calls == [[]]
    assert "seen" not in shared
    assert trace.execution_order() == []
    assert [d.node for d in trace.diagnostics("empty_batch")] == ["nothing"]


def test_post_is_sealed():
    with pytest.raises(SealedMethodMisuse):
        Items(Record(), []).post({}, None, None)
    with pytest.raises(SealedMethodMisuse):
        class Bad(BatchFlow):  # noqa: F841
            def post(self, shared, prep_res, exec_res):
                return None


def test_batch_flow_nested_in_flow(step):
    from neuralflow import Flow

    inner = Items(Record(), [1, 2])
    after = step(name="after")
    inner - "batch_done" >> after
    shared = {}
    Flow(inner).run(shared)
    assert [i for i, _ in shared["seen"]] == [1, 2]
    assert shared["visited"] == ["after"]
