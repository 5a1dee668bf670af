"""Custom exceptions for entityrepo."""


class EntityRepoError(Exception):
    """Base exception for all entityrepo errors."""

    pass


class ConfigurationError(EntityRepoError):
    """A collection or repository was given input it can never accept."""

    pass


class InvalidItemTypeError(ConfigurationError, TypeError):
    """Collection item does not implement the Entity protocol."""

    def __init__(self, item: object):
        """Initialize exception with the offending item.

        Args:
            item: The object that lacks a ``to_dict`` method.
        """
        self.item = item
        super().__init__(
            f"Collection items must implement Entity (to_dict), got {type(item).__name__}"
        )


class RecordShapeError(ConfigurationError, ValueError):
    """Bulk insert records do not share the same set of columns."""

    def __init__(self, index: int, expected: list[str], actual: list[str]):
        self.index = index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Record {index} has columns {actual}, expected {expected}"
        )


class InvalidPaginationError(EntityRepoError, ValueError):
    """Page number or page size is out of range."""

    pass


class DatabaseError(EntityRepoError):
    """Database operation failed."""

    pass


class TransactionError(DatabaseError):
    """Transaction control statement issued in the wrong state."""

    pass


class QueryError(EntityRepoError):
    """Query could not be built."""

    pass
