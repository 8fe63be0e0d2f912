"""Schema model and schema graph.

Key Components:
    - Database, Table, Column, Constraint: normalized relational schema
    - SchemaGraph, ForeignKeyEdge: table/foreign-key graph built from it
"""

from .graph import ForeignKeyEdge, SchemaGraph, build_graph
from .schema import Column, Constraint, Database, Table

__all__ = [
    "Column",
    "Constraint",
    "Database",
    "ForeignKeyEdge",
    "SchemaGraph",
    "Table",
    "build_graph",
]
