from neuralflow import Flow
from neuralflow.core.graph import FlowGraph


def test_handles_follow_breadth_first_order(step):
    a, b, c, d = (step(name=n) for n in "abcd")
    a >> b
    a - "x" >> c
    b >> d
    graph = FlowGraph.from_flow(Flow(a))
    assert [n.name for n in graph] == ["a", "b", "c", "d"]
    assert graph.node(0).ref is a
    assert len(graph) == 4
    assert {(e.src, e.action, e.dst) for e in graph.out_edges(0)} == {(0, None, 1), (0, "x", 2)}
    assert [n.name for n in graph.exits()] == ["c", "d"]
    assert not graph.has_cycles()


def test_shared_nodes_get_one_handle(step):
    a, b, c = step(name="a"), step(name="b"), step(name="c")
    a >> c
    a - "alt" >> b
    b >> c
    graph = FlowGraph.from_flow(Flow(a))
    assert len(graph) == 3
    assert not graph.has_cycles()


def test_cycles_are_reported(step):
    a, b = step(name="a"), step(name="b")
    a >> b
    b - "again" >> a
    graph = FlowGraph.from_flow(Flow(a))
    assert graph.find_cycles() == [[0, 1, 0]]


def test_self_loop(step):
    a = step(name="a")
    a - "again" >> a
    assert FlowGraph.from_node(a).find_cycles() == [[0, 0]]


def test_empty_flow_has_empty_graph():
    graph = FlowGraph.from_flow(Flow())
    assert len(graph) == 0
    assert graph.edges == []
