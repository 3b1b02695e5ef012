import pytest

from neuralflow import Flow, InvalidGraph, chain
from neuralflow.dsl import ConditionalTransition


def test_rshift_wires_default_edge(step):
    a, b = step(name="a"), step(name="b")
    assert (a >> b) is b
    assert a.successors == {None: b}


def test_labelled_edge(step):
    a, b = step(name="a"), step(name="b")
    pending = a - "yes"
    assert isinstance(pending, ConditionalTransition)
    assert (pending >> b) is b
    assert a.successors == {"yes": b}


def test_label_must_be_string(step):
    with pytest.raises(TypeError):
        step() - 3


def test_chain(step):
    a, b, c = step(name="a"), step(name="b"), step(name="c")
    assert chain(a, b, c) is a
    shared = {}
    Flow(a).run(shared)
    assert shared["visited"] == ["a", "b", "c"]


def test_chain_needs_nodes():
    with pytest.raises(InvalidGraph):
        chain()


def test_rshift_rejects_non_nodes(step):
    with pytest.raises(InvalidGraph):
        step() >> "b"
