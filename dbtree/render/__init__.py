"""Rendering of schema graphs.

A single entry point, :func:`render`, dispatches a (format, shape) pair to
its formatter:

    ======  ======  ===========================================
    format  shape   output
    ======  ======  ===========================================
    text    tree    box-drawing tree of tables and columns
    json    tree    nested JSON document plus orphans
    text    flat    alphabetical listing
    json    flat    alphabetical listing plus raw edges
    text    graph   ASCII box-and-arrow diagram
    ======  ======  ===========================================

Rendering is deterministic: the same graph always yields the same string.

Example:
    >>> from dbtree.render import render
    >>> print(render(graph, "text", "tree"))
"""

from __future__ import annotations

import logging
from typing import Callable

from dbtree.architecture.graph import SchemaGraph
from dbtree.errors import InvalidInputError, UnsupportedCombinationError
from dbtree.onto import OutputFormat, OutputShape
from dbtree.render.diagram import render_diagram
from dbtree.render.json_output import render_flat_json, render_tree_json
from dbtree.render.text import render_flat_text, render_tree_text
from dbtree.render.tree import TreeNode, build_tree

logger = logging.getLogger(__name__)

RENDERERS: dict[tuple[OutputFormat, OutputShape], Callable[[SchemaGraph], str]] = {
    (OutputFormat.TEXT, OutputShape.TREE): lambda g: render_tree_text(build_tree(g)),
    (OutputFormat.JSON, OutputShape.TREE): lambda g: render_tree_json(build_tree(g)),
    (OutputFormat.TEXT, OutputShape.FLAT): render_flat_text,
    (OutputFormat.JSON, OutputShape.FLAT): render_flat_json,
    (OutputFormat.TEXT, OutputShape.GRAPH): render_diagram,
}


def get_renderer(
    output_format: OutputFormat | str, shape: OutputShape | str
) -> Callable[[SchemaGraph], str]:
    """Look up the renderer for a format/shape pair.

    Raises:
        UnsupportedCombinationError: If the pair has no renderer
    """
    if output_format not in OutputFormat or shape not in OutputShape:
        raise UnsupportedCombinationError(
            f"unsupported format/shape combination: {output_format}/{shape}"
        )
    key = (OutputFormat(output_format), OutputShape(shape))
    if key == (OutputFormat.JSON, OutputShape.GRAPH):
        raise UnsupportedCombinationError(
            "graph shape is only supported with text format"
        )
    try:
        return RENDERERS[key]
    except KeyError as e:
        raise UnsupportedCombinationError(
            f"unsupported format/shape combination: {output_format}/{shape}"
        ) from e


def render(
    graph: SchemaGraph | None,
    output_format: OutputFormat | str,
    shape: OutputShape | str,
) -> str:
    """Render a schema graph.

    Args:
        graph: Schema graph to render
        output_format: "text" or "json"
        shape: "tree", "flat" or "graph"

    Returns:
        str: The complete rendering

    Raises:
        InvalidInputError: If graph is None
        UnsupportedCombinationError: If the format/shape pair is not supported
        SerializationError: If a JSON document cannot be serialized
    """
    if graph is None:
        raise InvalidInputError("schema graph cannot be None")
    renderer = get_renderer(output_format, shape)
    logger.debug(
        f"Rendering '{graph.database_name}' ({len(graph.nodes)} tables) "
        f"as {output_format}/{shape}"
    )
    return renderer(graph)


__all__ = [
    "RENDERERS",
    "TreeNode",
    "build_tree",
    "get_renderer",
    "render",
]
