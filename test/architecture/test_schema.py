import pytest
from pydantic import ValidationError

from dbtree.architecture.schema import Column, Constraint, Database, Table
from dbtree.onto import ConstraintKind


def test_database_from_dict(blog_schema):
    db = Database.from_dict(blog_schema)
    assert [t.name for t in db.tables] == ["users", "posts", "settings"]
    posts = db.table("posts")
    assert posts.column_names == ["id", "user_id", "title"]
    assert len(posts.foreign_keys) == 1
    assert posts.foreign_keys[0].reference_table == "users"
    assert db.table("settings").columns[1].is_nullable


def test_database_from_yaml(tmp_path, blog_schema):
    db = Database.from_dict(blog_schema)
    path = tmp_path / "schema.yaml"
    path.write_text(db.to_yaml_str())
    assert Database.from_yaml(str(path)) == db


def test_duplicate_table_names():
    with pytest.raises(ValueError, match="table name users used 2 times"):
        Database(name="db", tables=[Table(name="users"), Table(name="users")])


def test_foreign_key_requires_reference_table():
    with pytest.raises(ValidationError):
        Constraint(kind=ConstraintKind.FOREIGN_KEY, columns=["user_id"])


def test_models_are_frozen():
    column = Column(name="id", type="int")
    with pytest.raises(ValidationError):
        column.name = "other"


def test_reference_for_composite_key():
    fk = Constraint(
        kind="FOREIGN_KEY",
        columns=["a", "b", "c"],
        reference_table="t",
        reference_columns=["x", "y"],
    )
    assert fk.reference_for("a") == ["t.x"]
    assert fk.reference_for("b") == ["t.y"]
    # no referenced column at that position
    assert fk.reference_for("c") == []
    assert fk.reference_for("d") == []


def test_constraints_for(blog_schema):
    users = Database.from_dict(blog_schema).table("users")
    kinds = [c.kind for c in users.constraints_for("email")]
    assert kinds == [ConstraintKind.UNIQUE]
    with pytest.raises(KeyError):
        Database.from_dict(blog_schema).table("missing")
