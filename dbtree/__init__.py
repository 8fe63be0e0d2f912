"""dbtree: render relational database schemas.

dbtree turns a normalized description of a relational schema (tables,
columns, constraints, foreign keys) into a hierarchical tree, a flat
listing or an ASCII box-and-arrow diagram, as plain text or JSON.

Key Features:
    - Schema model loadable from YAML/JSON or introspected via SQLAlchemy
    - Foreign key graph with cycle-aware tree projection
    - Deterministic text, JSON and diagram output

Example:
    >>> from dbtree import SchemaInspector, build_graph, render
    >>> database = SchemaInspector("sqlite:///shop.db").inspect_schema()
    >>> print(render(build_graph(database), "text", "graph"))
"""

# --- Schema model & graph ---------------------------------------------------
from .architecture import (
    Column,
    Constraint,
    Database,
    ForeignKeyEdge,
    SchemaGraph,
    Table,
    build_graph,
)

# --- Introspection -----------------------------------------------------------
from .db import SchemaInspector

# --- Errors ------------------------------------------------------------------
from .errors import (
    DbtreeError,
    IntrospectionError,
    InvalidInputError,
    SerializationError,
    UnsupportedCombinationError,
)

# --- Enums & rendering -------------------------------------------------------
from .onto import ConstraintKind, OutputFormat, OutputShape
from .render import render

__all__ = [
    # Schema model & graph
    "Column",
    "Constraint",
    "Database",
    "ForeignKeyEdge",
    "SchemaGraph",
    "Table",
    "build_graph",
    # Introspection
    "SchemaInspector",
    # Errors
    "DbtreeError",
    "IntrospectionError",
    "InvalidInputError",
    "SerializationError",
    "UnsupportedCombinationError",
    # Enums & rendering
    "ConstraintKind",
    "OutputFormat",
    "OutputShape",
    "render",
]
