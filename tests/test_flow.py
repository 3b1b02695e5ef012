import pytest

from neuralflow import (
    Flow,
    FlowStepLimitExceeded,
    InvalidConfig,
    InvalidGraph,
    Node,
    SealedMethodMisuse,
)


class Multiply(Node):
    def exec(self, prep_res):
        return 10 * self.param("multiplier", int, 1)

    def post(self, shared, prep_res, exec_res):
        shared["currentValue"] = exec_res
        return "over_20" if exec_res > 20 else None


class Mark(Node):
    def exec(self, prep_res):
        return self.name

    def post(self, shared, prep_res, exec_res):
        shared.setdefault("visited", []).append(exec_res)


# --------------------------------------------------------------------------- #
# Walks
# --------------------------------------------------------------------------- #

def test_linear_walk_visits_each_node_once(step, trace):
    a, b, c = step(name="a"), step(name="b"), step(name="c")
    a >> b >> c
    shared = {}
    assert Flow(a).run(shared) is None
    assert shared["visited"] == ["a", "b", "c"]
    assert trace.execution_order() == ["a", "b", "c"]


def test_flow_returns_last_action(step):
    a, b = step(name="a"), step("finished", name="b")
    a >> b
    assert Flow(a).run({}) == "finished"


@pytest.mark.parametrize("multiplier, expected", [(3, ["big"]), (1, ["small"])])
def test_action_branching(multiplier, expected):
    start = Multiply()
    small, big = Mark(name="small"), Mark(name="big")
    start >> small
    start - "over_20" >> big
    flow = Flow(start)
    flow.set_params({"multiplier": multiplier})
    shared = {}
    flow.run(shared)
    assert shared["visited"] == expected


def test_params_overlay_on_run():
    flow = Flow(Multiply())
    flow.set_params({"multiplier": 1})
    shared = {}
    flow.run(shared, params={"multiplier": 3})
    assert shared["currentValue"] == 30
    # overrides apply to that call only
    flow.run(shared)
    assert shared["currentValue"] == 10
    assert flow.params == {"multiplier": 1}


def test_each_node_gets_its_own_params_copy():
    class Scribble(Node):
        def exec(self, prep_res):
            self.params["scribbled"] = True

    a, b = Scribble(name="a"), Mark(name="b")
    a >> b
    flow = Flow(a)
    flow.set_params({"x": 1})
    flow.run({})
    assert a.params == {"x": 1, "scribbled": True}
    assert b.params == {"x": 1}
    assert flow.params == {"x": 1}


def test_dangling_action_ends_flow_with_diagnostic(step, trace):
    a, b = step("unknown", name="a"), step(name="b")
    a - "known" >> b
    shared = {}
    assert Flow(a).run(shared) == "unknown"
    assert shared["visited"] == ["a"]
    diags = trace.diagnostics("dangling_action")
    assert len(diags) == 1
    assert diags[0].node == "a"


def test_explicit_action_does_not_fall_back_to_default(step):
    a, b = step("other", name="a"), step(name="b")
    a >> b
    shared = {}
    assert Flow(a).run(shared) == "other"
    assert shared["visited"] == ["a"]


def test_empty_action_follows_default_edge(step):
    a, b = step("", name="a"), step(name="b")
    a >> b
    shared = {}
    Flow(a).run(shared)
    assert shared["visited"] == ["a", "b"]


def test_no_start_node(trace):
    flow = Flow(name="empty")
    shared = {"k": 1}
    assert flow.run(shared) is None
    assert shared == {"k": 1}
    assert [d.node for d in trace.diagnostics("no_start_node")] == ["empty"]


def test_start_rejects_none():
    with pytest.raises(InvalidGraph):
        Flow().start(None)
    with pytest.raises(InvalidGraph):
        Flow("not a node")


def test_start_returns_node(step):
    a = step(name="a")
    flow = Flow()
    assert flow.start(a) is a
    assert flow.start_node is a


def test_failure_aborts_and_keeps_partial_mutations(step):
    class Boom(Node):
        def exec(self, prep_res):
            raise RuntimeError("boom")

    a, c = step(name="a"), step(name="c")
    a >> Boom() >> c
    shared = {}
    with pytest.raises(Exception):
        Flow(a).run(shared)
    assert shared["visited"] == ["a"]


def test_nested_flow_propagates_terminal_action(step):
    inner_a, inner_b = step(name="inner_a"), step("inner_done", name="inner_b")
    inner_a >> inner_b
    inner = Flow(inner_a, name="inner")
    after = step(name="after")
    inner - "inner_done" >> after
    outer = Flow(inner, name="outer")

    shared = {}
    outer.run(shared)
    assert shared["visited"] == ["inner_a", "inner_b", "after"]


def test_nested_flow_sees_enclosing_params():
    inner = Flow(Multiply(), name="inner")
    inner.set_params({"multiplier": 1})
    outer = Flow(inner)
    shared = {}
    outer.run(shared, params={"multiplier": 5})
    assert shared["currentValue"] == 50


def test_cycle_with_exit():
    class Counter(Node):
        def prep(self, shared):
            return shared.get("n", 0)

        def exec(self, n):
            return n + 1

        def post(self, shared, prep_res, exec_res):
            shared["n"] = exec_res
            return "again" if exec_res < 5 else "stop"

    counter = Counter()
    counter - "again" >> counter
    shared = {}
    assert Flow(counter).run(shared) == "stop"
    assert shared["n"] == 5


def test_max_steps_guard():
    class Loop(Node):
        def exec(self, prep_res):
            return None

    node = Loop()
    node >> node
    with pytest.raises(FlowStepLimitExceeded) as exc:
        Flow(node, max_steps=3).run({})
    assert exc.value.max_steps == 3


def test_max_steps_must_be_positive():
    with pytest.raises(InvalidConfig):
        Flow(max_steps=0)


def test_flow_exec_is_sealed(step):
    with pytest.raises(SealedMethodMisuse):
        Flow(step()).exec(None)
    with pytest.raises(SealedMethodMisuse):
        class Bad(Flow):  # noqa: F841
            def exec(self, prep_res):
                return None


def test_flow_post_can_replace_action(step):
    class Relabel(Flow):
        def post(self, shared, prep_res, exec_res):
            return f"flow:{exec_res}"

    assert Relabel(step("x")).run({}) == "flow:x"


def test_lifecycle_events(step, trace):
    a, b = step(name="a"), step(name="b")
    a >> b
    Flow(a, name="f").run({})
    [t] = trace.transitions()
    assert (t.flow, t.src, t.dst, t.action) == ("f", "a", "b", None)
