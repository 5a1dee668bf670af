"""Core types, collections and errors for entityrepo."""

from .collection import GenericCollection, field_value
from .config import Config
from .exceptions import (
    ConfigurationError,
    DatabaseError,
    EntityRepoError,
    InvalidItemTypeError,
    InvalidPaginationError,
    QueryError,
    RecordShapeError,
    TransactionError,
)
from .types import Criteria, Entity, EntityId, EntityMixin, Row

__all__ = [
    "Config",
    "GenericCollection",
    "field_value",
    "EntityRepoError",
    "ConfigurationError",
    "InvalidItemTypeError",
    "RecordShapeError",
    "InvalidPaginationError",
    "DatabaseError",
    "TransactionError",
    "QueryError",
    "Entity",
    "EntityMixin",
    "EntityId",
    "Criteria",
    "Row",
]
