"""Schema graph construction.

Turns a Database into a directed graph with one node per table and one
edge per foreign key, pointing from the table that holds the key to the
table it references. Nodes are keyed by table name; downstream layers
hold names rather than table records.

Example:
    >>> graph = build_graph(database)
    >>> [(e.from_table, e.to_table) for e in graph.edges]
    [('posts', 'users')]
"""

from __future__ import annotations

import logging

from pydantic import Field as PydanticField, model_validator

from dbtree.architecture.base import ConfigBaseModel
from dbtree.architecture.schema import Database, Table
from dbtree.errors import InvalidInputError

logger = logging.getLogger(__name__)


class ForeignKeyEdge(ConfigBaseModel):
    """A foreign key relationship between two tables.

    Attributes:
        from_table: Table holding the foreign key columns
        to_table: Referenced table
        columns: Local columns of the key
        reference_columns: Referenced columns, index-aligned with columns
    """

    from_table: str = PydanticField(..., alias="from")
    to_table: str = PydanticField(..., alias="to")
    columns: list[str] = PydanticField(default_factory=list)
    reference_columns: list[str] = PydanticField(
        default_factory=list, alias="referenceColumns"
    )

    @property
    def is_self_reference(self) -> bool:
        return self.from_table == self.to_table


class SchemaGraph(ConfigBaseModel):
    """Directed graph of tables and foreign keys.

    Edges whose endpoints are not both present in ``nodes`` are removed on
    construction, so every edge of a SchemaGraph connects two known tables.
    Edge order is the declaration order of tables and their constraints.
    """

    database_name: str = PydanticField(..., description="Name of the database.")
    nodes: dict[str, Table] = PydanticField(
        default_factory=dict, description="Tables keyed by name."
    )
    edges: list[ForeignKeyEdge] = PydanticField(
        default_factory=list, description="Foreign key edges in declaration order."
    )

    @model_validator(mode="after")
    def _drop_dangling_edges(self) -> SchemaGraph:
        kept = [
            e for e in self.edges if e.from_table in self.nodes and e.to_table in self.nodes
        ]
        if len(kept) != len(self.edges):
            logger.debug(
                f"Dropped {len(self.edges) - len(kept)} edge(s) with unknown endpoints "
                f"from graph '{self.database_name}'"
            )
            object.__setattr__(self, "edges", kept)
        return self

    def sorted_table_names(self) -> list[str]:
        return sorted(self.nodes)

    def has_relationships(self, name: str) -> bool:
        """Return True if any edge starts or ends at table ``name``."""
        return any(e.from_table == name or e.to_table == name for e in self.edges)


def build_graph(database: Database | None) -> SchemaGraph:
    """Build a SchemaGraph from a Database.

    Foreign keys whose referenced table is not part of the database are
    dropped, which keeps partially introspected schemas renderable.

    Args:
        database: Schema model to convert

    Returns:
        SchemaGraph: Graph with one node per table and one edge per foreign key

    Raises:
        InvalidInputError: If database is None
    """
    if database is None:
        raise InvalidInputError("schema cannot be None")

    nodes: dict[str, Table] = {t.name: t for t in database.tables}
    edges: list[ForeignKeyEdge] = []

    for table in database.tables:
        for fk in table.foreign_keys:
            if fk.reference_table not in nodes:
                logger.debug(
                    f"Skipping foreign key {table.name}{fk.columns} -> "
                    f"{fk.reference_table}: referenced table not found"
                )
                continue
            edges.append(
                ForeignKeyEdge(
                    from_table=table.name,
                    to_table=fk.reference_table,
                    columns=list(fk.columns),
                    reference_columns=list(fk.reference_columns),
                )
            )

    return SchemaGraph(database_name=database.name, nodes=nodes, edges=edges)
