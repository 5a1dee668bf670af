"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from entityrepo.store.database import Database
from entityrepo.store.repository import EntityRepository
from tests.fakes.entities import User, row_to_user

USERS_SCHEMA = """\
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT,
    role TEXT
);
"""


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def db(test_db_path: Path) -> Database:
    """Provide a connected database with the users table."""
    database = Database(test_db_path, schema=USERS_SCHEMA)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def user_repo(db: Database) -> EntityRepository[User]:
    """Provide an EntityRepository for the users table."""
    return EntityRepository(db, "users", row_to_user)


@pytest.fixture
def seeded_users(user_repo: EntityRepository[User]) -> EntityRepository[User]:
    """Provide a repository with four users."""
    user_repo.bulk_insert(
        [
            {"id": 1, "name": "Ann", "email": "ann@example.com", "role": "admin"},
            {"id": 2, "name": "Bob", "email": "bob@example.com", "role": "staff"},
            {"id": 3, "name": "Joanna", "email": None, "role": "staff"},
            {"id": 4, "name": "Dan", "email": "dan@example.org", "role": None},
        ]
    )
    return user_repo
