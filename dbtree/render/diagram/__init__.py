"""ASCII box-and-arrow diagrams of a schema graph.

Each connected component of the graph is laid out on its own canvas; the
rendered components are separated by a blank line.

Example:
    >>> print(render_diagram(graph))
    ┌──────────────────────────┐
    │          users           │
    ├──────────────────────────┤
    │ PK id                    │◄─┐
    ...
"""

from __future__ import annotations

import logging

from dbtree.architecture.graph import SchemaGraph
from dbtree.render.diagram.canvas import Canvas
from dbtree.render.diagram.layout import (
    TableLayout,
    allocate_canvas,
    compute_layouts,
    connected_components,
    draw_box,
    lane_base_x,
    order_component,
)
from dbtree.render.diagram.route import Relation, collect_relations, route_relations

logger = logging.getLogger(__name__)


def render_component(graph: SchemaGraph, component: list[str]) -> Canvas:
    """Lay out, draw and route one connected component."""
    order = order_component(graph, component)
    layouts = {layout.name: layout for layout in compute_layouts(graph, order)}
    relations = collect_relations(graph, layouts)
    canvas = allocate_canvas(list(layouts.values()), len(relations))
    for name, layout in layouts.items():
        draw_box(canvas, layout, graph.nodes[name])
    if relations:
        route_relations(canvas, relations, layouts, lane_base_x(list(layouts.values())))
    logger.debug(
        f"Drew component of {len(layouts)} table(s) with {len(relations)} relation(s) "
        f"on a {canvas.width}x{canvas.height} canvas"
    )
    return canvas


def render_diagram(graph: SchemaGraph) -> str:
    """Render the whole graph as ASCII diagrams, one per connected component."""
    return "\n\n".join(
        str(render_component(graph, component))
        for component in connected_components(graph)
    )


__all__ = [
    "Canvas",
    "Relation",
    "TableLayout",
    "render_component",
    "render_diagram",
]
