from rich.console import Console

from neuralflow import Flow, Node
from neuralflow.utils.trace import FlowTrace


class Flaky(Node):
    def __init__(self, **kw):
        super().__init__(max_retries=3, **kw)
        self.calls = 0

    def exec(self, prep_res):
        self.calls += 1
        if self.calls < 3:
            raise ValueError("transient")
        return "ok"


class Doomed(Node):
    def exec(self, prep_res):
        raise ValueError("always")

    def exec_fallback(self, prep_res, exc):
        return "recovered"


def test_visits_record_retries_and_fallbacks(step):
    a, b, c = Flaky(name="flaky"), Doomed(name="doomed", max_retries=2), step("end", name="end")
    a >> b >> c
    with FlowTrace() as trace:
        Flow(a).run({})
    rows = {v.node: v for v in trace.visits}
    assert trace.execution_order() == ["flaky", "doomed", "end"]
    assert rows["flaky"].retries == 2
    assert rows["doomed"].retries == 1
    assert rows["doomed"].fallbacks == 1
    assert rows["end"].action == "end"
    assert all(v.finished for v in trace.visits)


def test_nested_flow_visits(step):
    inner = Flow(step(name="inner_step"), name="inner")
    with FlowTrace() as trace:
        Flow(inner, name="outer").run({})
    assert trace.execution_order() == ["inner", "inner_step"]
    assert [(v.node, v.flow) for v in trace.visits] == [("inner", "outer"), ("inner_step", "inner")]


def test_failed_visit_is_left_open(step):
    class Boom(Node):
        def exec(self, prep_res):
            raise RuntimeError("boom")

    trace = FlowTrace().attach()
    try:
        Flow(Boom(name="boom")).run({})
    except Exception:
        pass
    finally:
        trace.detach()
    [visit] = trace.visits
    assert not visit.finished

    console = Console(record=True, width=120, color_system=None)
    console.print(trace.render())
    assert "failed" in console.export_text()


def test_detached_trace_stops_recording(step):
    trace = FlowTrace().attach()
    trace.detach()
    Flow(step()).run({})
    assert trace.events == []


def test_retries_counted_against_the_right_node_with_shared_names():
    class Inner(Node):
        def exec(self, prep_res):
            raise RuntimeError("inner down")

    class Outer(Node):
        def exec(self, prep_res):
            # same name as the node running inside the nested flow
            return Flow(Inner(name="job"), name="sub").run({})

        def exec_fallback(self, prep_res, exc):
            return "recovered"

    with FlowTrace() as trace:
        Flow(Outer(name="job", max_retries=2), name="main").run({})

    outer = [v for v in trace.visits if v.flow == "main"]
    inner = [v for v in trace.visits if v.flow == "sub"]
    assert [(v.retries, v.fallbacks, v.finished) for v in outer] == [(1, 1, True)]
    assert [(v.retries, v.fallbacks, v.finished) for v in inner] == [(0, 1, False), (0, 1, False)]
