"""Protocol definitions for entityrepo collaborators.

EntityRepository depends on these protocols rather than on the concrete
SQLite classes, so any storage backend with the same shape can be
injected, and tests can substitute in-memory fakes.

Protocols are organized by role:
- Connection: raw statements and transaction primitives
- Query: criteria-based query construction against one table
- Repository: the entity-level contract exposed to application code

Example:
    class UserService:
        def __init__(self, users: RepositoryProtocol[User]):
            self._users = users
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable, Protocol, Sequence, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from ..core.collection import GenericCollection
    from ..core.types import Criteria, EntityId, Row

T = TypeVar("T")


# =============================================================================
# Connection
# =============================================================================


@runtime_checkable
class CursorProtocol(Protocol):
    """Result of an executed statement."""

    rowcount: int

    def fetchone(self) -> Any: ...

    def fetchall(self) -> list[Any]: ...


@runtime_checkable
class DatabaseProtocol(Protocol):
    """Connection collaborator: statements and transactions."""

    def execute(self, sql: str, params: Sequence[Any] = ()) -> CursorProtocol: ...

    def executemany(self, sql: str, seq_of_params: Iterable[Sequence[Any]]) -> CursorProtocol: ...

    def begin_transaction(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


# =============================================================================
# Query
# =============================================================================


class SelectQueryProtocol(Protocol):
    """A SELECT under construction."""

    def where(self, column: str, operator: str, value: Any, boolean: str = "AND") -> Any: ...

    def where_in(self, column: str, values: Iterable[Any], boolean: str = "AND") -> Any: ...

    def where_group(self, callback: Callable[[Any], Any], boolean: str = "AND") -> Any: ...

    def order_by(self, column: str, direction: str = "ASC") -> Any: ...

    def paginate(self, page: int, per_page: int) -> Any: ...

    def get(self) -> list["Row"]: ...

    def get_one(self) -> "Row | None": ...

    def count(self) -> int: ...

    def exists(self) -> bool: ...


class QueryBuilderProtocol(Protocol):
    """Query collaborator bound to one table."""

    def select(self, columns: Sequence[str] | None = None) -> SelectQueryProtocol: ...

    def insert(self, data: dict[str, Any]) -> int: ...

    def insert_many(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> int: ...

    def update(self, data: dict[str, Any], key: str, value: Any) -> int: ...

    def delete(self, key: str, value: Any) -> int: ...

    def count(self) -> int: ...


# =============================================================================
# Repository
# =============================================================================


class RepositoryProtocol(Protocol[T]):
    """Entity-level data access contract."""

    def find_all(self) -> "GenericCollection[T]": ...

    def find_by_id(self, id: "EntityId") -> T | None: ...

    def find_by_ids(self, ids: Iterable["EntityId"]) -> "GenericCollection[T]": ...

    def find_by(self, criteria: "Criteria") -> "GenericCollection[T]": ...

    def find_one_by(self, criteria: "Criteria") -> T | None: ...

    def find_by_like(self, fields: str | Sequence[str], pattern: str) -> "GenericCollection[T]": ...

    def paginate(self, page: int = 1, limit: int | None = None) -> "GenericCollection[T]": ...

    def count_by(self, criteria: "Criteria | None" = None) -> int: ...

    def create(self, data: dict[str, Any]) -> bool: ...

    def bulk_insert(self, records: Sequence[dict[str, Any]]) -> bool: ...

    def update(self, id: "EntityId", data: dict[str, Any]) -> bool: ...

    def delete(self, id: "EntityId") -> bool: ...

    def count(self) -> int: ...

    def exists(self, criteria: "Criteria") -> bool: ...

    def begin_transaction(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
