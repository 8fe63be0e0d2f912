"""Core enumerations shared across dbtree.

This module provides the string enumerations used throughout the package:
output formats and shapes accepted by the renderer, and the kinds of
table constraints carried by the schema model.

Key Components:
    - BaseEnum: Base class for string-based enumerations with flexible membership testing
    - OutputFormat: Serialization format of a rendering (text or json)
    - OutputShape: Structure of a rendering (tree, flat or graph)
    - ConstraintKind: Kind of a table constraint

Example:
    >>> "json" in OutputFormat  # True
    >>> "yaml" in OutputFormat  # False
    >>> OutputShape("graph") is OutputShape.GRAPH  # True
"""

from enum import EnumMeta

from strenum import StrEnum


class MetaEnum(EnumMeta):
    """Metaclass for flexible enumeration membership testing.

    Allows checking whether a raw value is a valid member of an enum with
    the `in` operator, without instantiating the member first.
    """

    def __contains__(self, member: object) -> bool:
        """Check if a value is a valid member of the enum.

        Args:
            member: Value to check for membership

        Returns:
            bool: True if the value is a valid enum member, False otherwise
        """
        if isinstance(member, self):
            return True
        try:
            self(member)
            return True
        except ValueError:
            return False


class BaseEnum(StrEnum, metaclass=MetaEnum):
    """Base class for string-based enumerations."""

    def __str__(self) -> str:
        """Return the enum value as string for proper serialization."""
        return self.value

    def __repr__(self) -> str:
        """Return the enum value as string for proper serialization."""
        return self.value


def _register_yaml_representer():
    """Register a YAML representer so BaseEnum members dump as plain strings."""
    import yaml

    def base_enum_representer(dumper, data):
        return dumper.represent_scalar("tag:yaml.org,2002:str", str(data.value))

    yaml.add_representer(BaseEnum, base_enum_representer)
    yaml.add_multi_representer(BaseEnum, base_enum_representer)


_register_yaml_representer()


class OutputFormat(BaseEnum):
    """Serialization format of a rendering.

    Attributes:
        TEXT: Human-readable text (box-drawing tree, listing or diagram)
        JSON: Machine-readable JSON document
    """

    TEXT = "text"
    JSON = "json"


class OutputShape(BaseEnum):
    """Structure of a rendering.

    Attributes:
        TREE: Hierarchy of tables nested under the tables they reference
        FLAT: Alphabetical listing of tables
        GRAPH: Node-and-arrow ASCII diagram
    """

    TREE = "tree"
    FLAT = "flat"
    GRAPH = "graph"


class ConstraintKind(BaseEnum):
    """Kind of a table constraint.

    Attributes:
        PRIMARY_KEY: Primary key
        FOREIGN_KEY: Foreign key referencing another (or the same) table
        UNIQUE: Uniqueness constraint
        CHECK: Check constraint with a textual predicate
    """

    PRIMARY_KEY = "PRIMARY_KEY"
    FOREIGN_KEY = "FOREIGN_KEY"
    UNIQUE = "UNIQUE"
    CHECK = "CHECK"
