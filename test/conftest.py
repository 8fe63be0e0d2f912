import logging

import pytest
import yaml
from sqlalchemy import create_engine, text

from dbtree.architecture.graph import build_graph
from dbtree.architecture.schema import Database

logger = logging.getLogger(__name__)


def graph_from_yaml(text):
    return build_graph(Database.from_dict(yaml.safe_load(text)))


@pytest.fixture()
def blog_schema():
    return yaml.safe_load(
        """
        name: test_db
        tables:
        -   name: users
            columns:
            -   {name: id, type: int, is_nullable: false}
            -   {name: email, type: varchar, is_nullable: false}
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: UNIQUE, columns: [email]}
        -   name: posts
            columns:
            -   {name: id, type: int, is_nullable: false}
            -   {name: user_id, type: int, is_nullable: false}
            -   {name: title, type: varchar, is_nullable: false}
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   kind: FOREIGN_KEY
                columns: [user_id]
                reference_table: users
                reference_columns: [id]
        -   name: settings
            columns:
            -   {name: key, type: varchar, is_nullable: false}
            -   {name: value, type: text}
            constraints:
            -   {kind: PRIMARY_KEY, columns: [key]}
        """
    )


@pytest.fixture()
def blog_graph(blog_schema):
    return build_graph(Database.from_dict(blog_schema))


@pytest.fixture()
def circular_graph():
    return graph_from_yaml(
        """
        name: circular_db
        tables:
        -   name: departments
            columns:
            -   {name: id, type: int}
            -   {name: name, type: varchar}
            -   {name: manager_id, type: int}
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [manager_id], reference_table: employees, reference_columns: [id]}
        -   name: employees
            columns:
            -   {name: id, type: int}
            -   {name: name, type: varchar}
            -   {name: dept_id, type: int}
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [dept_id], reference_table: departments, reference_columns: [id]}
        """
    )


@pytest.fixture()
def triangle_graph():
    return graph_from_yaml(
        """
        name: complex_circular_db
        tables:
        -   name: a
            columns: [{name: id, type: int}, {name: b_id, type: int}]
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [b_id], reference_table: b, reference_columns: [id]}
        -   name: b
            columns: [{name: id, type: int}, {name: c_id, type: int}]
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [c_id], reference_table: c, reference_columns: [id]}
        -   name: c
            columns: [{name: id, type: int}, {name: a_id, type: int}]
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [a_id], reference_table: a, reference_columns: [id]}
        """
    )


@pytest.fixture()
def self_ref_graph():
    return graph_from_yaml(
        """
        name: self_ref_db
        tables:
        -   name: employees
            columns:
            -   {name: id, type: int}
            -   {name: name, type: varchar}
            -   {name: manager_id, type: int}
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [manager_id], reference_table: employees, reference_columns: [id]}
        """
    )


@pytest.fixture()
def tagging_graph():
    """post_tags references both posts and tags; tags also has a detached cycle neighbour."""
    return graph_from_yaml(
        """
        name: tagging_db
        tables:
        -   name: posts
            columns: [{name: id, type: int}]
            constraints: [{kind: PRIMARY_KEY, columns: [id]}]
        -   name: tags
            columns: [{name: id, type: int}, {name: label, type: text}]
            constraints:
            -   {kind: PRIMARY_KEY, columns: [id]}
            -   {kind: UNIQUE, columns: [label]}
        -   name: post_tags
            columns: [{name: post_id, type: int}, {name: tag_id, type: int}]
            constraints:
            -   {kind: PRIMARY_KEY, columns: [post_id, tag_id]}
            -   {kind: FOREIGN_KEY, columns: [post_id], reference_table: posts, reference_columns: [id]}
            -   {kind: FOREIGN_KEY, columns: [tag_id], reference_table: tags, reference_columns: [id]}
        -   name: x
            columns: [{name: id, type: int}, {name: y_id, type: int}]
            constraints:
            -   {kind: FOREIGN_KEY, columns: [y_id], reference_table: y, reference_columns: [id]}
        -   name: y
            columns: [{name: id, type: int}, {name: x_id, type: int}]
            constraints:
            -   {kind: FOREIGN_KEY, columns: [x_id], reference_table: x, reference_columns: [id]}
        """
    )


@pytest.fixture()
def all_graphs(blog_graph, circular_graph, triangle_graph, self_ref_graph, tagging_graph):
    return [blog_graph, circular_graph, triangle_graph, self_ref_graph, tagging_graph]


@pytest.fixture()
def make_graph():
    return graph_from_yaml


SHOP_DDL = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        email TEXT NOT NULL,
        UNIQUE (email)
    )
    """,
    """
    CREATE TABLE posts (
        id INTEGER PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users (id),
        title TEXT,
        views INTEGER DEFAULT 0,
        CONSTRAINT positive_views CHECK (views >= 0)
    )
    """,
    "CREATE TABLE settings (key TEXT PRIMARY KEY, value TEXT)",
]


@pytest.fixture()
def shop_db_path(tmp_path):
    """SQLite file with users, posts (FK to users) and an isolated settings table."""
    path = tmp_path / "shop.db"
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        for statement in SHOP_DDL:
            conn.execute(text(statement))
    engine.dispose()
    return path
