"""Test fakes for testing without real infrastructure.

This module provides recording implementations of the collaborator
protocols, so repository behavior can be asserted in terms of the calls
it makes.

Example:
    from tests.fakes import RecordingDatabase, RecordingQueryBuilder

    builder = RecordingQueryBuilder(rows=[{"id": 1, "name": "Ann"}])
    repo = EntityRepository(RecordingDatabase(), "users", row_to_user, query_builder=builder)
"""

from .entities import Tag, User, row_to_user
from .repos import (
    RecordingCursor,
    RecordingDatabase,
    RecordingQueryBuilder,
    RecordingSelectQuery,
)

__all__ = [
    "Tag",
    "User",
    "row_to_user",
    "RecordingCursor",
    "RecordingDatabase",
    "RecordingQueryBuilder",
    "RecordingSelectQuery",
]