"""Plain-text formatters: box-drawing tree and flat listing."""

from __future__ import annotations

from dbtree.architecture.graph import SchemaGraph
from dbtree.architecture.schema import Table
from dbtree.render.annotate import annotation_suffix
from dbtree.render.tree import TreeNode

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "
BULLET = "• "

CIRCULAR_SUFFIX = " (circular reference)"
ALREADY_SHOWN_SUFFIX = " (see above)"


def _column_text(table: Table, column) -> str:
    return f"{column.name} ({column.type}){annotation_suffix(table, column.name)}"


def _column_lines(table: Table, prefix: str, last_closes: bool) -> list[str]:
    lines = []
    for i, column in enumerate(table.columns):
        is_last = last_closes and i == len(table.columns) - 1
        lines.append(
            f"{prefix}{LAST_BRANCH if is_last else BRANCH}{_column_text(table, column)}"
        )
    return lines


def render_tree_text(tree: TreeNode) -> str:
    """Render a projected tree with box-drawing connectors.

    The first line is the name of the top node (the database). Circular and
    already shown occurrences print their name and a suffix only. The orphan
    bucket is printed after the tree as a bulleted section.
    """
    lines = [tree.table_name]
    branches = [c for c in tree.children if not c.is_orphan_bucket]
    buckets = [c for c in tree.children if c.is_orphan_bucket]

    stack: list[tuple[TreeNode, str, bool]] = [
        (child, "", i == len(branches) - 1) for i, child in enumerate(branches)
    ]
    stack.reverse()
    while stack:
        node, prefix, is_last = stack.pop()
        suffix = ""
        if node.is_circular:
            suffix = CIRCULAR_SUFFIX
        elif node.already_shown:
            suffix = ALREADY_SHOWN_SUFFIX
        lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH}{node.table_name}{suffix}")
        if node.is_marker:
            continue

        inner = prefix + (SPACE if is_last else PIPE)
        if node.table is not None:
            lines.extend(_column_lines(node.table, inner, not node.children))
        for i in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[i], inner, i == len(node.children) - 1))

    for bucket in buckets:
        lines.append("")
        lines.append("Orphan tables:")
        for orphan in bucket.children:
            lines.append(f"{BULLET}{orphan.table_name}")
            if orphan.table is not None:
                lines.extend(_column_lines(orphan.table, "  ", True))

    return "\n".join(lines) + "\n"


def render_flat_text(graph: SchemaGraph) -> str:
    """Render every table in name order with its annotated columns."""
    lines = [f"Database: {graph.database_name}", f"Tables: {len(graph.nodes)}", ""]
    for name in graph.sorted_table_names():
        table = graph.nodes[name]
        lines.append(name)
        for column in table.columns:
            lines.append(f"  - {_column_text(table, column)}")
        lines.append("")
    return "\n".join(lines) + "\n"
