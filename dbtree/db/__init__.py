"""Database introspection.

Key Components:
    - SchemaInspector: reads tables, columns and constraints through SQLAlchemy

Example:
    >>> from dbtree.db import SchemaInspector
    >>> database = SchemaInspector("postgresql://localhost/shop").inspect_schema("public")
"""

from .inspector import SchemaInspector, normalize_url

__all__ = [
    "SchemaInspector",
    "normalize_url",
]
