from rich.console import Console

from neuralflow import BatchNode, Flow
from neuralflow.utils.dag import RenderOptions, build_rich_tree, to_mermaid


class Split(BatchNode):
    def exec_item(self, item):
        return item


def _render(tree) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(tree)
    return console.export_text()


def test_tree_shows_nodes_and_labels(step):
    a, b, c = step(name="load"), step(name="score"), step(name="big")
    a >> b
    b - "over_20" >> c
    text = _render(build_rich_tree(Flow(a, name="Pipeline")))
    assert "Pipeline" in text
    assert "load" in text
    assert "over_20 ⇒" in text
    assert "big" in text


def test_tree_marks_back_references(step):
    a, b = step(name="a"), step(name="b")
    a >> b
    b - "again" >> a
    text = _render(build_rich_tree(Flow(a)))
    assert "↺ a" in text


def test_tree_expands_subflows(step):
    inner = Flow(step(name="inner_step"), name="inner")
    text = _render(build_rich_tree(Flow(inner, name="outer")))
    assert "sub-flow" in text
    assert "inner_step" in text

    flat = _render(build_rich_tree(Flow(inner, name="outer"), RenderOptions(expand_subflows=False)))
    assert "inner_step" not in flat


def test_tree_without_start_node():
    assert "<no start node>" in _render(build_rich_tree(Flow(name="empty")))


def test_tree_escapes_markup_in_names(step):
    text = _render(build_rich_tree(Flow(step(name="[red]x"), name="f")))
    assert "[red]x" in text


def test_mermaid(step):
    a, b = step(name="Load Data"), Split(name="split")
    a >> b
    b - "retry" >> a
    assert to_mermaid(Flow(a)).splitlines() == [
        "graph LR",
        '    n0_load_data["Load Data"]',
        '    n1_split[/"split"/]',
        "    n0_load_data --> n1_split",
        "    n1_split -->|retry| n0_load_data",
    ]


def test_mermaid_marks_subflows(step):
    inner = Flow(step(), name="inner")
    assert '    n0_inner[["inner"]]' in to_mermaid(Flow(inner))


def test_mermaid_escapes_edge_labels(step):
    a, b = step(name="a"), step(name="b")
    a - 'yes|"no"' >> b
    assert "    n0_a -->|yes#124;#quot;no#quot;| n1_b" in to_mermaid(Flow(a)).splitlines()
