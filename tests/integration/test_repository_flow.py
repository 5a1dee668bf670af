"""End-to-end flow: configured database, two repositories, collections."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from entityrepo.core.collection import GenericCollection
from entityrepo.core.config import Config
from entityrepo.core.exceptions import DatabaseError
from entityrepo.core.types import EntityMixin
from entityrepo.store.database import Database
from entityrepo.store.repository import EntityRepository

SCHEMA = """\
CREATE TABLE IF NOT EXISTS authors (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY,
    author_id INTEGER NOT NULL REFERENCES authors(id),
    title TEXT NOT NULL,
    year INTEGER
);
"""


@dataclass(frozen=True)
class Author(EntityMixin):
    id: int
    name: str


@dataclass(frozen=True)
class Book(EntityMixin):
    id: int
    author_id: int
    title: str
    year: int | None = None


class BookCollection(GenericCollection[Book]):
    """Books with a domain helper."""

    def titles(self) -> list[str]:
        return [book.title for book in self]


@pytest.fixture
def library(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("ENTITYREPO_DB_PATH", str(tmp_path / "library.db"))
    config = Config.from_env()
    db = Database.from_config(config, schema=SCHEMA)
    db.connect()

    authors = EntityRepository(db, "authors", lambda row: Author(**row))
    books = EntityRepository(
        db,
        "books",
        lambda row: Book(**row),
        alias="b",
        collection_factory=BookCollection,
        page_size=config.default_page_size,
    )
    yield db, authors, books
    db.close()


class TestLibraryFlow:
    """Repositories sharing one database."""

    def test_books_grouped_by_author(self, library):
        _, authors, books = library
        authors.bulk_insert([{"id": 1, "name": "Le Guin"}, {"id": 2, "name": "Herbert"}])
        books.bulk_insert(
            [
                {"id": 1, "author_id": 1, "title": "The Dispossessed", "year": 1974},
                {"id": 2, "author_id": 2, "title": "Dune", "year": 1965},
                {"id": 3, "author_id": 1, "title": "The Lathe of Heaven", "year": 1971},
            ]
        )

        by_author = books.find_all().sort_by_property("year").group_by(lambda b: b.author_id)

        assert list(by_author) == [2, 1]
        assert by_author[1].titles() == ["The Lathe of Heaven", "The Dispossessed"]
        assert isinstance(by_author[2], BookCollection)

    def test_failed_unit_of_work_rolls_back_both_tables(self, library):
        db, authors, books = library

        authors.begin_transaction()
        try:
            authors.create({"id": 1, "name": "Le Guin"})
            books.create({"id": 1, "author_id": 99, "title": "Orphan"})
        except DatabaseError:
            authors.rollback()

        assert not db.in_transaction
        assert authors.count() == 0
        assert books.count() == 0

    def test_snapshots_serialize(self, library):
        _, authors, _ = library
        authors.create({"id": 1, "name": "Le Guin"})

        assert authors.find_all().to_json() == '[{"id": 1, "name": "Le Guin"}]'
