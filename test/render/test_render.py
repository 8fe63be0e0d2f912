import itertools
import json

import pytest

from dbtree.errors import InvalidInputError, UnsupportedCombinationError
from dbtree.onto import OutputFormat, OutputShape
from dbtree.render import RENDERERS, get_renderer, render

VALID_PAIRS = list(RENDERERS)


def test_none_graph_is_rejected():
    with pytest.raises(InvalidInputError, match="cannot be None"):
        render(None, "text", "tree")


@pytest.mark.parametrize(
    "output_format, shape",
    [("invalid", "tree"), ("text", "invalid"), ("invalid", "invalid"), ("xml", "flat")],
)
def test_unknown_combination(blog_graph, output_format, shape):
    with pytest.raises(UnsupportedCombinationError, match="unsupported format/shape"):
        render(blog_graph, output_format, shape)


def test_json_graph_is_an_error(blog_graph):
    with pytest.raises(UnsupportedCombinationError, match="only supported with text"):
        render(blog_graph, OutputFormat.JSON, OutputShape.GRAPH)


def test_all_other_pairs_have_renderers():
    pairs = set(itertools.product(OutputFormat, OutputShape))
    assert pairs - set(VALID_PAIRS) == {(OutputFormat.JSON, OutputShape.GRAPH)}
    assert get_renderer("text", "graph") is RENDERERS[(OutputFormat.TEXT, OutputShape.GRAPH)]


@pytest.mark.parametrize("output_format, shape", VALID_PAIRS)
def test_rendering_is_deterministic(all_graphs, output_format, shape):
    for graph in all_graphs:
        assert render(graph, output_format, shape) == render(graph, output_format, shape)


@pytest.mark.parametrize("output_format, shape", VALID_PAIRS)
def test_every_table_appears(all_graphs, output_format, shape):
    for graph in all_graphs:
        output = render(graph, output_format, shape)
        for name in graph.nodes:
            assert name in output


def _json_names(doc):
    names = []
    stack = list(doc.get("tables", [])) + list(doc.get("orphans", []))
    while stack:
        item = stack.pop()
        names.append(item["name"])
        stack.extend(item.get("children", []))
    return names


def test_json_tree_covers_every_table(all_graphs):
    for graph in all_graphs:
        doc = json.loads(render(graph, "json", "tree"))
        assert doc["database"] == graph.database_name
        assert set(_json_names(doc)) == set(graph.nodes)


def test_flat_listing_is_sorted(all_graphs):
    for graph in all_graphs:
        doc = json.loads(render(graph, "json", "flat"))
        names = [t["name"] for t in doc["tables"]]
        assert names == sorted(graph.nodes)
        assert len(doc["edges"]) == len(graph.edges)


def test_two_table_cycle_is_marked(circular_graph):
    output = render(circular_graph, "text", "tree")
    assert "(circular reference)" in output
    assert "departments" in output
    assert "employees" in output


def test_three_table_cycle_is_marked(triangle_graph):
    output = render(triangle_graph, "text", "tree")
    assert "(circular reference)" in output
    for name in ("a", "b", "c"):
        assert f"── {name}" in output


def test_self_reference_is_not_duplicated(self_ref_graph):
    lines = render(self_ref_graph, "text", "tree").splitlines()
    occurrences = [line for line in lines if line.endswith("── employees")]
    markers = [line for line in lines if line.endswith("employees (circular reference)")]
    assert len(occurrences) == 1
    assert len(markers) == 1


def test_isolated_table_is_an_orphan(blog_graph):
    tree_text = render(blog_graph, "text", "tree")
    main, orphan_section = tree_text.split("\nOrphan tables:\n")
    assert "settings" not in main
    assert orphan_section.startswith("• settings")

    tree_json = json.loads(render(blog_graph, "json", "tree"))
    assert [t["name"] for t in tree_json["orphans"]] == ["settings"]

    flat_text = render(blog_graph, "text", "flat")
    assert "\nsettings\n" in flat_text
    assert "Orphan" not in flat_text
    flat_json = json.loads(render(blog_graph, "json", "flat"))
    assert "orphans" not in flat_json
    assert "settings" in [t["name"] for t in flat_json["tables"]]


def test_diagram_connects_tables(blog_graph):
    output = render(blog_graph, "text", "graph")
    assert "users" in output
    assert "posts" in output
    assert "◄" in output
    assert any(corner in output for corner in "┐┘")
