"""Exception hierarchy for dbtree.

Rendering is a pure computation, so every error here is raised to the
caller; none of them is logged and swallowed inside the library.
"""


class DbtreeError(Exception):
    """Base class for all dbtree errors."""


class InvalidInputError(DbtreeError, ValueError):
    """Raised when a schema or schema graph is absent."""


class UnsupportedCombinationError(DbtreeError, ValueError):
    """Raised when a format/shape pair has no renderer."""


class SerializationError(DbtreeError):
    """Raised when a JSON document cannot be produced from the output models."""


class IntrospectionError(DbtreeError):
    """Raised when reading schema metadata from a live database fails."""
