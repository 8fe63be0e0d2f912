"""Constraint annotations shared by the formatters.

A column gets a ``PRIMARY KEY`` or ``UNIQUE`` tag only when it is the sole
member of such a constraint, and a ``table.column`` reference for every
foreign key position it occupies.
"""

from __future__ import annotations

from dbtree.architecture.schema import Table
from dbtree.onto import ConstraintKind

_SINGLE_COLUMN_TAGS = {
    ConstraintKind.PRIMARY_KEY.value: "PRIMARY KEY",
    ConstraintKind.UNIQUE.value: "UNIQUE",
}

ARROW = "→"


def column_annotations(table: Table, column: str) -> list[tuple[str, str]]:
    """Return ``(kind, text)`` annotations for a column in constraint order.

    ``kind`` is ``"constraint"`` for a PRIMARY KEY/UNIQUE tag and
    ``"reference"`` for a foreign key target.
    """
    out: list[tuple[str, str]] = []
    for constraint in table.constraints:
        tag = _SINGLE_COLUMN_TAGS.get(str(constraint.kind))
        if tag is not None and constraint.columns == [column]:
            out.append(("constraint", tag))
        for ref in constraint.reference_for(column):
            out.append(("reference", ref))
    return out


def annotation_suffix(table: Table, column: str) -> str:
    """Text form of the annotations, e.g. `` PRIMARY KEY → users.id``."""
    parts = []
    for kind, text in column_annotations(table, column):
        parts.append(f" {ARROW} {text}" if kind == "reference" else f" {text}")
    return "".join(parts)


def constraint_and_reference(table: Table, column: str) -> tuple[str | None, str | None]:
    """Return the last matching tag and the last matching reference of a column."""
    constraint = reference = None
    for kind, text in column_annotations(table, column):
        if kind == "constraint":
            constraint = text
        else:
            reference = text
    return constraint, reference


def box_label(table: Table, column: str) -> str:
    """Label of a column inside a diagram box: ``[PK] [FK] name [(unique)]``."""
    kinds = {str(c.kind) for c in table.constraints_for(column)}
    is_pk = ConstraintKind.PRIMARY_KEY.value in kinds
    parts = []
    if is_pk:
        parts.append("PK")
    if ConstraintKind.FOREIGN_KEY.value in kinds:
        parts.append("FK")
    parts.append(column)
    if ConstraintKind.UNIQUE.value in kinds and not is_pk:
        parts.append("(unique)")
    return " ".join(parts)
