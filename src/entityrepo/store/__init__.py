"""Data access layer for entityrepo.

This package provides:
- Database: SQLite connection and transaction management
- QueryBuilder: criteria-based query construction for one table
- EntityRepository: rows-to-entities repository with CRUD and transactions

Example:
    from entityrepo.store import Database, EntityRepository

    db = Database("app.db")
    db.connect()
    users = EntityRepository(db, "users", lambda row: User(**row))
"""

from .database import Database
from .query import ClauseBuilder, QueryBuilder, SelectQuery, quote_identifier
from .repository import EntityRepository

__all__ = [
    "Database",
    "QueryBuilder",
    "SelectQuery",
    "ClauseBuilder",
    "quote_identifier",
    "EntityRepository",
]
