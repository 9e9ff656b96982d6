import json

from deconstructor.graph.builder import build_graph
from deconstructor.graph.nodes import CombinationData, GraphNode, OriginData
from deconstructor.models import Combination, Definition, MorphemePart
from deconstructor.render.measure import ORIGIN_MAX_WIDTH, TextMeasurer
from deconstructor.render.svg import to_json, to_svg, wrap_html
from deconstructor.render.sync import FitViewport, RenderSync


def _positioned(definition, **kwargs):
    sync = RenderSync(FitViewport())
    sync.commit_structure(*build_graph(definition, **kwargs))
    sync.report_sizes(TextMeasurer().measure_all(sync.nodes))
    return sync


def test_svg_contains_every_node_and_edge(definition) -> None:
    sync = _positioned(definition)
    svg = to_svg(sync.nodes, sync.edges, frame=sync.viewport.frame, title="deconstructor")

    assert svg.startswith("<svg")
    assert "<title>deconstructor</title>" in svg
    assert svg.count("<line ") == 7
    for node in sync.nodes:
        assert f'id="node-{node.id}"' in svg
    assert "construere" in svg
    assert 'opacity="0.15"' not in svg


def test_svg_fades_nodes_while_loading(definition) -> None:
    sync = _positioned(definition, is_loading=True)
    svg = to_svg(sync.nodes, sync.edges)
    assert svg.count('opacity="0.15"') == 9


def test_svg_escapes_text() -> None:
    d = Definition(
        parts=(MorphemePart(id="a", text="<b>", original_word="a&b", origin="Latin", meaning='"quoted"'),),
        layers=((Combination("c", "c", "x < y", ("a",)),),),
    )
    sync = _positioned(d)
    svg = to_svg(sync.nodes, sync.edges)

    assert "&lt;b&gt;" in svg
    assert "a&amp;b" in svg
    assert "<b>" not in svg


def test_html_includes_panzoom_script() -> None:
    html = wrap_html('<svg viewBox="0 0 10 10"></svg>', title="t")
    assert "<svg" in html
    assert "Drag to pan" in html
    assert "wheel" in html
    assert "<title>t</title>" in html


def test_json_dump(definition) -> None:
    sync = _positioned(definition)
    payload = json.loads(to_json(sync.nodes, sync.edges))

    assert len(payload["nodes"]) == 9
    assert len(payload["edges"]) == 7
    first = payload["nodes"][0]
    assert first["type"] == "input"
    assert "on_submit" not in first["data"]
    assert set(first["measured"]) == {"width", "height"}


def test_origin_card_wraps_within_cap() -> None:
    measurer = TextMeasurer()
    short = GraphNode(id="o", layer=2, data=OriginData(original_word="de-", origin="Latin", meaning="down"))
    long = GraphNode(
        id="o",
        layer=2,
        data=OriginData(
            original_word="de-",
            origin="Latin",
            meaning="down, off, away, from, concerning, reversing the action of the verb it attaches to",
        ),
    )

    assert measurer.measure(long).width <= ORIGIN_MAX_WIDTH
    assert measurer.measure(long).height > measurer.measure(short).height


def test_long_title_widens_card() -> None:
    measurer = TextMeasurer()
    node = GraphNode(
        id="c",
        layer=3,
        data=CombinationData(text="antidisestablishmentarianism", definition="x"),
    )
    assert measurer.measure(node).width > measurer.metrics.text_width("antidisestablishmentarianism", 20) - 1
