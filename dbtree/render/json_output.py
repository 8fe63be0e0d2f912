"""JSON formatters.

Documents are written with a two-space indent and without null fields, so
optional keys (``constraint``, ``reference``, ``children``, ``orphans``)
are left out when empty. The flat document is a pydantic output model; the
tree document nests one level per table and is written iteratively.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import Field as PydanticField
from pydantic_core import PydanticSerializationError

from dbtree.architecture.base import ConfigBaseModel
from dbtree.architecture.graph import ForeignKeyEdge, SchemaGraph
from dbtree.architecture.schema import Table
from dbtree.errors import SerializationError
from dbtree.render.annotate import constraint_and_reference
from dbtree.render.tree import TreeNode

logger = logging.getLogger(__name__)

JSON_INDENT = "  "


class ColumnDoc(ConfigBaseModel):
    name: str
    type: str
    constraint: str | None = None
    reference: str | None = None


class TableDoc(ConfigBaseModel):
    """A table of the flat listing."""

    name: str
    columns: list[ColumnDoc] = PydanticField(default_factory=list)


class FlatDoc(ConfigBaseModel):
    database: str
    tables: list[TableDoc] = PydanticField(default_factory=list)
    edges: list[ForeignKeyEdge] = PydanticField(default_factory=list)


def _column_docs(table: Table) -> list[ColumnDoc]:
    docs = []
    for column in table.columns:
        constraint, reference = constraint_and_reference(table, column.name)
        docs.append(
            ColumnDoc(
                name=column.name,
                type=column.type,
                constraint=constraint,
                reference=reference,
            )
        )
    return docs


def _table_doc(node: TreeNode) -> dict[str, Any]:
    """Convert a tree node and its descendants into nested plain dicts.

    Circular and already shown occurrences keep their name only.
    """
    root: dict[str, Any] = {"name": node.table_name}
    stack = [(node, root)]
    while stack:
        current, doc = stack.pop()
        if current.is_marker:
            continue
        columns = _column_docs(current.table) if current.table is not None else []
        doc["columns"] = [c.model_dump(exclude_none=True) for c in columns]
        if current.children:
            doc["children"] = [{"name": c.table_name} for c in current.children]
            stack.extend(zip(current.children, doc["children"]))
    return root


def _encode(value: Any) -> str:
    """Encode nested dicts and lists like ``json.dumps(value, indent=2)``.

    Containers are unrolled on an explicit stack, so nesting depth is not
    bounded by the interpreter's recursion limit. Scalars go through
    ``json.dumps``.
    """
    out: list[str] = []
    # str items are literal output, tuples are (value, nesting level)
    stack: list[str | tuple[Any, int]] = [(value, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        current, level = item
        if isinstance(current, dict):
            entries = [
                (json.dumps(k, ensure_ascii=False) + ": ", v) for k, v in current.items()
            ]
            opening, closing = "{", "}"
        elif isinstance(current, list):
            entries = [("", v) for v in current]
            opening, closing = "[", "]"
        else:
            out.append(json.dumps(current, ensure_ascii=False))
            continue
        if not entries:
            out.append(opening + closing)
            continue
        out.append(opening)
        pad = JSON_INDENT * (level + 1)
        pending: list[str | tuple[Any, int]] = []
        for i, (prefix, child) in enumerate(entries):
            pending.append(("\n" if i == 0 else ",\n") + pad + prefix)
            pending.append((child, level + 1))
        pending.append("\n" + JSON_INDENT * level + closing)
        stack.extend(reversed(pending))
    return "".join(out)


def _dump(document: ConfigBaseModel) -> str:
    try:
        return document.model_dump_json(indent=2, by_alias=True, exclude_none=True)
    except PydanticSerializationError as e:
        raise SerializationError(f"failed to serialize JSON: {e}") from e


def render_tree_json(tree: TreeNode) -> str:
    """Render a projected tree as a JSON document.

    Orphans go to the top-level ``orphans`` array rather than ``tables``.
    """
    document: dict[str, Any] = {"database": tree.table_name, "tables": []}
    for child in tree.children:
        if child.is_orphan_bucket:
            document.setdefault("orphans", []).extend(
                _table_doc(o) for o in child.children
            )
        else:
            document["tables"].append(_table_doc(child))
    try:
        return _encode(document)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to serialize JSON: {e}") from e


def render_flat_json(graph: SchemaGraph) -> str:
    """Render tables in name order plus the raw foreign key edges."""
    document = FlatDoc(database=graph.database_name, edges=list(graph.edges))
    for name in graph.sorted_table_names():
        table = graph.nodes[name]
        document.tables.append(TableDoc(name=name, columns=_column_docs(table)))
    logger.debug(
        f"Serialized {len(document.tables)} tables and {len(document.edges)} edges "
        f"of '{graph.database_name}'"
    )
    return _dump(document)
