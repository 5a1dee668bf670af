"""Collaborator and repository protocols for dependency injection."""

from .protocols import (
    CursorProtocol,
    DatabaseProtocol,
    QueryBuilderProtocol,
    RepositoryProtocol,
    SelectQueryProtocol,
)

__all__ = [
    "CursorProtocol",
    "DatabaseProtocol",
    "QueryBuilderProtocol",
    "SelectQueryProtocol",
    "RepositoryProtocol",
]
