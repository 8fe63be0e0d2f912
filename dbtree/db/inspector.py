"""Schema introspection through SQLAlchemy.

This module reads table metadata from a live database and normalizes it
into a :class:`~dbtree.architecture.schema.Database`. Dialect differences
are left to SQLAlchemy's reflection layer, so any engine SQLAlchemy can
reflect (PostgreSQL, MySQL, SQLite, ...) is supported.

Example:
    >>> inspector = SchemaInspector("sqlite:///shop.db")
    >>> database = inspector.inspect_schema()
    >>> [t.name for t in database.tables]
    ['posts', 'users']
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.exc import CompileError, SQLAlchemyError

from dbtree.architecture.schema import Column, Constraint, Database, Table
from dbtree.errors import IntrospectionError
from dbtree.onto import ConstraintKind

logger = logging.getLogger(__name__)

SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")
SQLITE_DATABASE_NAME = "main"
SQLITE_SCHEME = "sqlite://"
# scheme aliases SQLAlchemy no longer accepts
SCHEME_ALIASES = {"postgres://": "postgresql://"}


def normalize_url(url: str) -> str:
    """Turn a connection string into a SQLAlchemy URL.

    A bare path ending in a SQLite suffix and ``sqlite://<relative path>``
    become ``sqlite:///<path>``; ``postgres://`` becomes ``postgresql://``.
    Other URLs, including ``sqlite:///...`` and in-memory ``sqlite://``, are
    returned unchanged.
    """
    if "://" not in url:
        if url.endswith(SQLITE_SUFFIXES):
            return f"sqlite:///{url}"
        return url
    for alias, scheme in SCHEME_ALIASES.items():
        if url.startswith(alias):
            return scheme + url[len(alias) :]
    if url.startswith(SQLITE_SCHEME):
        path = url[len(SQLITE_SCHEME) :]
        if path and not path.startswith("/"):
            return f"sqlite:///{path}"
    return url


class SchemaInspector:
    """Reads a database schema via SQLAlchemy reflection.

    An engine created from a URL belongs to the inspector and is disposed
    after each inspection; an engine passed in is left to its owner.

    Attributes:
        engine: SQLAlchemy engine used for reflection
    """

    def __init__(self, engine: Engine | str):
        """Initialize the inspector.

        Args:
            engine: SQLAlchemy engine, or a connection URL to create one from

        Raises:
            IntrospectionError: If no engine can be created from the URL
        """
        self._owns_engine = isinstance(engine, str)
        if isinstance(engine, str):
            url = normalize_url(engine)
            try:
                engine = create_engine(url)
            except (SQLAlchemyError, ImportError) as e:
                raise IntrospectionError(f"invalid connection URL: {e}") from e
        self.engine = engine

    @property
    def database_name(self) -> str:
        url = self.engine.url
        if url.get_backend_name() == "sqlite":
            return SQLITE_DATABASE_NAME
        return url.database or url.get_backend_name()

    def inspect_schema(self, schema: str | None = None) -> Database:
        """Introspect every table of a schema.

        Args:
            schema: Catalog schema to read; the connection's default if None

        Returns:
            Database: Tables sorted by name, with columns and constraints

        Raises:
            IntrospectionError: If reflection fails
        """
        try:
            insp = inspect(self.engine)
            names = sorted(insp.get_table_names(schema=schema))
            logger.info(
                f"Inspecting {len(names)} tables of '{self.database_name}'"
                + (f" (schema '{schema}')" if schema else "")
            )
            tables = [self._table(insp, name, schema) for name in names]
        except SQLAlchemyError as e:
            raise IntrospectionError(f"failed to inspect database schema: {e}") from e
        finally:
            if self._owns_engine:
                self.engine.dispose()
        return Database(name=self.database_name, tables=tables)

    def _table(self, insp: Any, name: str, schema: str | None) -> Table:
        columns = [self._column(c) for c in insp.get_columns(name, schema=schema)]
        constraints = self._constraints(insp, name, schema)
        logger.debug(
            f"Table '{name}': {len(columns)} columns, {len(constraints)} constraints"
        )
        return Table(name=name, columns=columns, constraints=constraints)

    def _column(self, info: dict[str, Any]) -> Column:
        default = info.get("default")
        return Column(
            name=info["name"],
            type=self._type_name(info["type"]),
            is_nullable=bool(info.get("nullable", True)),
            default=None if default is None else str(default),
        )

    def _type_name(self, sa_type: Any) -> str:
        try:
            return str(sa_type.compile(dialect=self.engine.dialect))
        except CompileError:
            logger.debug(f"Cannot compile type {sa_type!r}, using its class name")
            return type(sa_type).__name__

    def _constraints(self, insp: Any, name: str, schema: str | None) -> list[Constraint]:
        constraints = []

        pk = insp.get_pk_constraint(name, schema=schema)
        if pk and pk.get("constrained_columns"):
            constraints.append(
                Constraint(
                    kind=ConstraintKind.PRIMARY_KEY,
                    columns=list(pk["constrained_columns"]),
                    name=pk.get("name"),
                )
            )

        for fk in insp.get_foreign_keys(name, schema=schema):
            if not fk.get("referred_table"):
                continue
            constraints.append(
                Constraint(
                    kind=ConstraintKind.FOREIGN_KEY,
                    columns=list(fk["constrained_columns"]),
                    reference_table=fk["referred_table"],
                    reference_columns=list(fk.get("referred_columns") or []),
                    name=fk.get("name"),
                )
            )

        for uq in self._optional(insp.get_unique_constraints, name, schema):
            constraints.append(
                Constraint(
                    kind=ConstraintKind.UNIQUE,
                    columns=list(uq["column_names"]),
                    name=uq.get("name"),
                )
            )

        for ck in self._optional(insp.get_check_constraints, name, schema):
            constraints.append(
                Constraint(
                    kind=ConstraintKind.CHECK,
                    check_expression=ck.get("sqltext"),
                    name=ck.get("name"),
                )
            )

        return constraints

    @staticmethod
    def _optional(method, name: str, schema: str | None) -> list[dict[str, Any]]:
        """Call a reflection method some dialects do not implement."""
        try:
            return method(name, schema=schema)
        except NotImplementedError:
            logger.debug(f"{method.__name__} is not supported by this dialect")
            return []
