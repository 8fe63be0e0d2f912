"""Relational schema model.

This module defines the passive, normalized description of a relational
database consumed by the graph builder and the renderers. Instances are
produced by the introspection layer (see dbtree.db) or loaded from a
YAML/JSON description, and are immutable once built.

Key Components:
    - Column: A table column with its type, nullability and default
    - Constraint: Primary key, foreign key, unique or check constraint
    - Table: Ordered columns plus constraints
    - Database: Named collection of uniquely named tables

Example:
    >>> db = Database.from_dict(
    ...     {
    ...         "name": "shop",
    ...         "tables": [
    ...             {
    ...                 "name": "users",
    ...                 "columns": [{"name": "id", "type": "int"}],
    ...                 "constraints": [{"kind": "PRIMARY_KEY", "columns": ["id"]}],
    ...             }
    ...         ],
    ...     }
    ... )
    >>> db.table("users").column_names
    ['id']
"""

from __future__ import annotations

from collections import Counter

from pydantic import ConfigDict, Field as PydanticField, model_validator

from dbtree.architecture.base import ConfigBaseModel
from dbtree.onto import ConstraintKind


class Column(ConfigBaseModel):
    """A table column.

    Attributes:
        name: Column name
        type: Opaque type tag as reported by the database (e.g. "varchar(255)")
        is_nullable: Whether the column accepts NULL
        default: Default value expression, if any
    """

    model_config = ConfigDict(frozen=True)

    name: str = PydanticField(..., description="Column name.")
    type: str = PydanticField(..., description="Database type of the column.")
    is_nullable: bool = PydanticField(
        default=True, description="Whether the column accepts NULL."
    )
    default: str | None = PydanticField(
        default=None, description="Default value expression as text."
    )


class Constraint(ConfigBaseModel):
    """A table constraint.

    For foreign keys, ``columns[i]`` references ``reference_columns[i]`` of
    ``reference_table``. Lists of different lengths are accepted; only the
    positions present in both are matched.

    Attributes:
        kind: Constraint kind
        columns: Local columns covered by the constraint
        reference_table: Referenced table (foreign keys only)
        reference_columns: Referenced columns, index-aligned with columns
        check_expression: Predicate text (check constraints only)
        name: Constraint name as reported by the database, if any
    """

    model_config = ConfigDict(frozen=True)

    kind: ConstraintKind = PydanticField(..., description="Constraint kind.")
    columns: list[str] = PydanticField(
        default_factory=list, description="Local column names."
    )
    reference_table: str | None = PydanticField(
        default=None, description="Referenced table of a foreign key."
    )
    reference_columns: list[str] = PydanticField(
        default_factory=list,
        description="Referenced column names, index-aligned with columns.",
    )
    check_expression: str | None = PydanticField(
        default=None, description="Predicate of a check constraint."
    )
    name: str | None = PydanticField(default=None, description="Constraint name.")

    @model_validator(mode="after")
    def _check_reference(self) -> Constraint:
        if self.kind == ConstraintKind.FOREIGN_KEY and not self.reference_table:
            raise ValueError(
                f"foreign key on columns {self.columns} has no reference_table"
            )
        return self

    @property
    def is_foreign_key(self) -> bool:
        return self.kind == ConstraintKind.FOREIGN_KEY

    def reference_for(self, column: str) -> list[str]:
        """Return ``table.column`` references of a foreign key for a local column.

        A column may appear more than once in a composite key; every position
        that has a matching referenced column yields one reference.
        """
        if not self.is_foreign_key:
            return []
        return [
            f"{self.reference_table}.{self.reference_columns[j]}"
            for j, local in enumerate(self.columns)
            if local == column and j < len(self.reference_columns)
        ]


class Table(ConfigBaseModel):
    """A database table with ordered columns and its constraints."""

    model_config = ConfigDict(frozen=True)

    name: str = PydanticField(..., description="Table name, unique within a database.")
    columns: list[Column] = PydanticField(
        default_factory=list, description="Columns in declaration order."
    )
    constraints: list[Constraint] = PydanticField(
        default_factory=list, description="Constraints in declaration order."
    )

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def foreign_keys(self) -> list[Constraint]:
        return [c for c in self.constraints if c.is_foreign_key]

    def constraints_for(self, column: str) -> list[Constraint]:
        """Return the constraints that cover ``column``, in declaration order."""
        return [c for c in self.constraints if column in c.columns]


class Database(ConfigBaseModel):
    """A named database schema.

    Raises:
        ValueError: If two tables share a name.
    """

    model_config = ConfigDict(frozen=True)

    name: str = PydanticField(..., description="Database name.")
    tables: list[Table] = PydanticField(
        default_factory=list, description="Tables in introspection order."
    )

    @model_validator(mode="after")
    def _check_unique_names(self) -> Database:
        c = Counter(t.name for t in self.tables)
        for k, v in c.items():
            if v > 1:
                raise ValueError(f"table name {k} used {v} times")
        return self

    def table(self, name: str) -> Table:
        """Fetch a table by name.

        Raises:
            KeyError: If no table has that name.
        """
        for t in self.tables:
            if t.name == name:
                return t
        raise KeyError(name)
