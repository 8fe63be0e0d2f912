"""Arrow routing between table boxes.

Each relation (one foreign key column) leaves its source box at the row of
the column, runs right to its own vertical lane, follows the lane up or down
to the middle row of the target box and runs back left into the target's
right border, ending in an arrowhead. Lanes are two columns apart so
parallel arrows never share a vertical run.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from dbtree.architecture.graph import SchemaGraph
from dbtree.render.diagram.canvas import Canvas
from dbtree.render.diagram.layout import LANE_SPACING, TableLayout

logger = logging.getLogger(__name__)

ARROWHEAD = "◄"


class Relation(BaseModel):
    """A foreign key column to draw as one arrow."""

    source: str
    column: str
    target: str
    reference_column: str


def collect_relations(
    graph: SchemaGraph, layouts: dict[str, TableLayout]
) -> list[Relation]:
    """List the drawable relations of a component.

    Tables are visited in layout order, foreign keys in declaration order.
    Relations whose target is outside the component, or whose column is not
    a column of the source table, are skipped.
    """
    relations = []
    for name, layout in layouts.items():
        table = graph.nodes[name]
        for fk in table.foreign_keys:
            if fk.reference_table not in layouts:
                logger.debug(
                    f"Skipping relation {name} -> {fk.reference_table}: target not in component"
                )
                continue
            for j, column in enumerate(fk.columns):
                if j >= len(fk.reference_columns):
                    break
                if column not in layout.column_rows:
                    logger.debug(f"Skipping relation from unknown column {name}.{column}")
                    continue
                relations.append(
                    Relation(
                        source=name,
                        column=column,
                        target=fk.reference_table,
                        reference_column=fk.reference_columns[j],
                    )
                )
    return relations


def draw_relation(
    canvas: Canvas,
    relation: Relation,
    lane_x: int,
    layouts: dict[str, TableLayout],
) -> None:
    """Draw one relation using the vertical lane at column ``lane_x``."""
    source = layouts.get(relation.source)
    target = layouts.get(relation.target)
    if source is None or target is None:
        logger.debug(f"Skipping relation {relation.source} -> {relation.target}: no layout")
        return

    start_y = source.y + source.column_rows[relation.column]
    end_y = target.mid_row

    canvas.hline(source.right + 1, lane_x - 1, start_y)
    if start_y == end_y:
        # loop one row down so the return run does not retrace the stub
        canvas.put(lane_x, start_y, "┐")
        canvas.put(lane_x, start_y + 1, "┘")
        end_y = start_y + 1
    else:
        downwards = end_y > start_y
        step = 1 if downwards else -1
        canvas.put(lane_x, start_y, "┐" if downwards else "┘")
        if abs(end_y - start_y) > 1:
            canvas.vline(lane_x, start_y + step, end_y - step)
        canvas.put(lane_x, end_y, "┘" if downwards else "┐")

    canvas.hline(target.right + 2, lane_x - 1, end_y)
    canvas.put(target.right + 1, end_y, ARROWHEAD)


def route_relations(
    canvas: Canvas,
    relations: list[Relation],
    layouts: dict[str, TableLayout],
    base_x: int,
) -> None:
    """Draw every relation, relation ``i`` in lane ``base_x + 2 * i``."""
    for index, relation in enumerate(relations):
        draw_relation(canvas, relation, base_x + LANE_SPACING * index, layouts)
