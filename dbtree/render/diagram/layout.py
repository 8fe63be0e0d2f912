"""Diagram layout: components, table ordering, box geometry and box drawing.

Tables are split into connected components (edges taken as undirected).
Each component is drawn as one column of boxes stacked top to bottom, in an
order where referenced tables come before the tables that reference them.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field as PydanticField

from dbtree.architecture.graph import SchemaGraph
from dbtree.architecture.schema import Table
from dbtree.render.annotate import box_label
from dbtree.render.diagram.canvas import Canvas

logger = logging.getLogger(__name__)

MIN_BOX_WIDTH = 26
# top border, title row, separator
HEADER_ROWS = 3
BOX_GAP = 1
ARROW_STUB = 2
LANE_SPACING = 2
LANE_MARGIN = 2


class TableLayout(BaseModel):
    """Geometry of one table box on a component canvas.

    Attributes:
        name: Table name
        y: Row of the top border
        width: Interior width; the box spans ``width + 2`` columns
        height: Rows from top border to bottom border inclusive
        column_rows: Column name -> row offset within the box
        labels: Formatted column labels in column order
    """

    name: str
    y: int = 0
    width: int
    height: int
    column_rows: dict[str, int] = PydanticField(default_factory=dict)
    labels: list[str] = PydanticField(default_factory=list)

    @property
    def right(self) -> int:
        """Column of the right border."""
        return self.width + 1

    @property
    def mid_row(self) -> int:
        """Canvas row at the vertical middle of the box."""
        return self.y + self.height // 2


def connected_components(graph: SchemaGraph) -> list[list[str]]:
    """Split tables into undirected connected components.

    Components are discovered from table names in sorted order and listed in
    discovery order, as are the tables within each component.
    """
    adjacency: dict[str, set[str]] = {name: set() for name in graph.nodes}
    for edge in graph.edges:
        adjacency[edge.from_table].add(edge.to_table)
        adjacency[edge.to_table].add(edge.from_table)

    seen: set[str] = set()
    components = []
    for name in graph.sorted_table_names():
        if name in seen:
            continue
        component = []
        seen.add(name)
        stack = [name]
        while stack:
            current = stack.pop()
            component.append(current)
            for neighbour in sorted(adjacency[current], reverse=True):
                if neighbour not in seen:
                    seen.add(neighbour)
                    stack.append(neighbour)
        components.append(component)
    return components


def order_component(graph: SchemaGraph, component: list[str]) -> list[str]:
    """Order a component's tables with Kahn's algorithm.

    A table is ready once every table it references has been placed. Ready
    tables are taken in name order. Self references are ignored; tables
    left in a cycle are appended in component order.
    """
    members = set(component)
    edges = [
        e
        for e in graph.edges
        if e.from_table in members and e.to_table in members and not e.is_self_reference
    ]
    unresolved = {name: 0 for name in component}
    for edge in edges:
        unresolved[edge.from_table] += 1

    ready = sorted(name for name in component if unresolved[name] == 0)
    order: list[str] = []
    while ready:
        current = ready.pop(0)
        order.append(current)
        for edge in edges:
            if edge.to_table == current:
                unresolved[edge.from_table] -= 1
                if unresolved[edge.from_table] == 0:
                    ready.append(edge.from_table)
        ready.sort()

    placed = set(order)
    residual = [name for name in component if name not in placed]
    if residual:
        logger.debug(f"Cycle among {residual}, appending in component order")
    return order + residual


def compute_layouts(graph: SchemaGraph, order: list[str]) -> list[TableLayout]:
    """Compute box geometry for tables stacked in ``order``.

    All boxes of a component share the widest box's width so that borders
    and arrow stubs line up.
    """
    layouts = []
    for name in order:
        table = graph.nodes[name]
        labels = [box_label(table, c.name) for c in table.columns]
        longest = max([len(name), *(len(label) for label in labels)])
        layouts.append(
            TableLayout(
                name=name,
                width=max(MIN_BOX_WIDTH, longest + 2),
                height=HEADER_ROWS + len(labels) + 1,
                column_rows={c.name: HEADER_ROWS + i for i, c in enumerate(table.columns)},
                labels=labels,
            )
        )

    width = max((layout.width for layout in layouts), default=MIN_BOX_WIDTH)
    y = 0
    for layout in layouts:
        layout.width = width
        layout.y = y
        y += layout.height + BOX_GAP
    return layouts


def lane_base_x(layouts: list[TableLayout]) -> int:
    """Column of the first arrow lane."""
    return layouts[0].right + 1 + ARROW_STUB


def allocate_canvas(layouts: list[TableLayout], relation_count: int) -> Canvas:
    """Allocate a canvas holding every box and ``relation_count`` arrow lanes."""
    if not layouts:
        return Canvas(0, 0)
    width = lane_base_x(layouts) + LANE_SPACING * max(relation_count, 1) + LANE_MARGIN
    height = sum(layout.height for layout in layouts) + BOX_GAP * (len(layouts) - 1)
    return Canvas(width, height)


def draw_box(canvas: Canvas, layout: TableLayout, table: Table) -> None:
    """Draw a table box: border, centered title, separator and column rows."""
    w = layout.width
    y = layout.y
    pad = (w - len(table.name)) // 2
    canvas.write(0, y, "┌" + "─" * w + "┐")
    canvas.write(0, y + 1, "│" + " " * pad + table.name + " " * (w - pad - len(table.name)) + "│")
    canvas.write(0, y + 2, "├" + "─" * w + "┤")
    for i, label in enumerate(layout.labels):
        canvas.write(0, y + HEADER_ROWS + i, "│ " + label + " " * (w - len(label) - 1) + "│")
    canvas.write(0, y + layout.height - 1, "└" + "─" * w + "┘")
