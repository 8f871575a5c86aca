from datetime import datetime

import pytest

from katakana_srs.db import Database
from katakana_srs.seed import seed_all


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_katakana.db")
    return db_path


@pytest.fixture
def db(tmp_db):
    """An open, empty database."""
    database = Database(tmp_db).open()
    yield database
    database.close()


@pytest.fixture
def seeded_db(db):
    """An open database with the full catalog seeded and no lessons done."""
    seed_all(db)
    return db


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 14, 25, 0)
