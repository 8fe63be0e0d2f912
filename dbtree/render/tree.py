"""Tree projection of a schema graph.

Projects the foreign key graph onto a single rooted tree for hierarchical
display: a table appears under each table it references. Cycles are cut by
marking the re-entering occurrence as circular, tables reached through a
second parent are marked as already shown, and tables without any
relationship are collected in a separate orphan bucket.

Rules:
    - A table touched by no edge is an orphan, never a root.
    - A root is any other table with no foreign key to a different table.
    - Roots are expanded in name order; when there are none, the smallest
      related table is the starting point. Related tables still unvisited
      afterwards (cycles detached from every root) are expanded in name order
      as further starting points, so every table appears at least once.

The traversal keeps an explicit stack of (node, pending children) frames
instead of recursing, so schema depth does not bound Python's call stack.
"""

from __future__ import annotations

import logging
from typing import Iterator

from pydantic import BaseModel, Field as PydanticField

from dbtree.architecture.graph import SchemaGraph
from dbtree.architecture.schema import Table

logger = logging.getLogger(__name__)

ORPHAN_BUCKET = "orphan_tables"


class TreeNode(BaseModel):
    """One occurrence of a table in the projected tree.

    Attributes:
        table_name: Name of the table (or of the synthetic node)
        table: Table record; None for synthetic nodes
        children: Child occurrences, i.e. tables referencing this one
        is_circular: This occurrence re-enters a table on the current path
        already_shown: This table was fully rendered elsewhere in the tree
    """

    table_name: str
    table: Table | None = None
    children: list[TreeNode] = PydanticField(default_factory=list)
    is_circular: bool = False
    already_shown: bool = False

    @property
    def is_marker(self) -> bool:
        """True for occurrences rendered as a bare name (circular or already shown)."""
        return self.is_circular or self.already_shown

    @property
    def is_orphan_bucket(self) -> bool:
        return self.table is None and self.table_name == ORPHAN_BUCKET


class _TreeBuilder:
    """Single-use builder holding the traversal state of one projection."""

    def __init__(self, graph: SchemaGraph):
        self.graph = graph
        self.children_map: dict[str, list[str]] = {name: [] for name in graph.nodes}
        for edge in graph.edges:
            self.children_map[edge.to_table].append(edge.from_table)
        self.visited: set[str] = set()
        self.processing: set[str] = set()

    def _occurrence(self, name: str) -> tuple[TreeNode, bool]:
        """Create the node for one occurrence of ``name``.

        Returns:
            tuple: The node and whether its children still have to be expanded
        """
        table = self.graph.nodes.get(name)
        if name in self.processing:
            return TreeNode(table_name=name, table=table, is_circular=True), False
        if name in self.visited:
            return TreeNode(table_name=name, table=table, already_shown=True), False
        self.visited.add(name)
        self.processing.add(name)
        return TreeNode(table_name=name, table=table), True

    def expand(self, start: str) -> TreeNode:
        """Depth-first expansion from ``start``."""
        root, fresh = self._occurrence(start)
        if not fresh:
            return root
        stack: list[tuple[TreeNode, Iterator[str]]] = [
            (root, iter(self.children_map[start]))
        ]
        while stack:
            node, pending = stack[-1]
            child_name = next(pending, None)
            if child_name is None:
                self.processing.discard(node.table_name)
                stack.pop()
                continue
            child, fresh = self._occurrence(child_name)
            node.children.append(child)
            if fresh:
                stack.append((child, iter(self.children_map[child_name])))
        return root

    def build(self) -> TreeNode:
        graph = self.graph
        top = TreeNode(table_name=graph.database_name)

        related = {e.from_table for e in graph.edges} | {e.to_table for e in graph.edges}
        references_other = {e.from_table for e in graph.edges if not e.is_self_reference}
        roots = sorted(related - references_other)

        for root in roots:
            top.children.append(self.expand(root))

        # cycles with no root: restart from the smallest unvisited related table
        for name in sorted(related):
            if name not in self.visited:
                logger.debug(
                    f"Table '{name}' is not reachable from a root, expanding it as a starting point"
                )
                top.children.append(self.expand(name))

        orphans = sorted(set(graph.nodes) - related)
        if orphans:
            bucket = TreeNode(table_name=ORPHAN_BUCKET)
            for name in orphans:
                self.visited.add(name)
                bucket.children.append(
                    TreeNode(table_name=name, table=graph.nodes[name])
                )
            top.children.append(bucket)

        return top


def build_tree(graph: SchemaGraph) -> TreeNode:
    """Project a schema graph onto a tree.

    Args:
        graph: Schema graph to project

    Returns:
        TreeNode: Synthetic node named after the database whose children are
        the expanded starting tables, followed by the orphan bucket if any
    """
    return _TreeBuilder(graph).build()
