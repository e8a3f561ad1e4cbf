# =============================================================================
# conftest.py - shared pytest fixtures
# =============================================================================

import pytest

import config
from database import init_db


@pytest.fixture
def db(tmp_path, monkeypatch):
    """A fresh, empty database file for one test."""
    path = tmp_path / "transfer_desk_test.db"
    monkeypatch.setattr(config, "DB_PATH", str(path))
    assert init_db()
    return path
