import pytest

from dbtree.config import DbtreeSettings
from dbtree.onto import OutputFormat, OutputShape


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("DBTREE_CONN", "DBTREE_FORMAT", "DBTREE_SHAPE", "DBTREE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = DbtreeSettings()
    assert settings.conn is None
    assert settings.format == OutputFormat.TEXT
    assert settings.shape == OutputShape.TREE
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DBTREE_SHAPE", "graph")
    monkeypatch.setenv("dbtree_conn", "shop.db")
    settings = DbtreeSettings()
    assert settings.shape == OutputShape.GRAPH
    assert settings.conn == "shop.db"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("DBTREE_FORMAT=json\nUNRELATED=1\n")
    assert DbtreeSettings().format == OutputFormat.JSON


def test_invalid_shape(monkeypatch):
    monkeypatch.setenv("DBTREE_SHAPE", "pie")
    with pytest.raises(ValueError):
        DbtreeSettings()


def test_log_level_is_normalized(monkeypatch):
    monkeypatch.setenv("DBTREE_LOG_LEVEL", "debug")
    assert DbtreeSettings().log_level == "DEBUG"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("DBTREE_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError, match="log level must be one of"):
        DbtreeSettings()
