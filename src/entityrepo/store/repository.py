"""Generic entity repository.

EntityRepository translates entity-level requests into query-builder calls
and maps the resulting rows back to entities. Row mapping and collection
construction are injected, so one repository class serves every entity
kind without subclassing.

Example:
    @dataclass(frozen=True)
    class User(EntityMixin):
        id: int
        name: str

    users = EntityRepository(db, "users", lambda row: User(**row))
    users.create({"id": 1, "name": "Ann"})
    users.find_by_id(1)  # User(id=1, name="Ann")
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, Iterator, Sequence, TypeVar

from loguru import logger

from ..app.protocols import DatabaseProtocol, QueryBuilderProtocol, SelectQueryProtocol
from ..core.collection import GenericCollection
from ..core.exceptions import InvalidPaginationError, RecordShapeError
from ..core.types import Criteria, Entity, EntityId, Row
from .query import QueryBuilder

if TYPE_CHECKING:
    from ..core.config import Config

T = TypeVar("T", bound=Entity)

RowMapper = Callable[[Row], T]
CollectionFactory = Callable[[list[T]], GenericCollection[T]]


class EntityRepository(Generic[T]):
    """Repository mapping rows of one table to entities."""

    def __init__(
        self,
        db: DatabaseProtocol,
        table: str,
        row_to_entity: RowMapper[T],
        *,
        alias: str | None = None,
        primary_key: str = "id",
        collection_factory: CollectionFactory[T] = GenericCollection,
        query_builder: QueryBuilderProtocol | None = None,
        page_size: int = 10,
    ):
        """Initialize the repository.

        Args:
            db: Connection collaborator; owns transactions.
            table: Table name.
            row_to_entity: Builds an entity from a row dictionary.
            alias: Optional table alias for qualified column names.
            primary_key: Primary key column.
            collection_factory: Builds the collection returned by finders.
            query_builder: Query collaborator; defaults to a QueryBuilder on ``db``.
            page_size: Default ``limit`` for ``paginate``.
        """
        self.db = db
        self.table = table
        self.alias = alias
        self.primary_key = primary_key
        self.page_size = page_size
        self._row_to_entity = row_to_entity
        self._collection_factory = collection_factory
        self.query_builder = query_builder or QueryBuilder(db, table, alias)

    @classmethod
    def from_config(
        cls,
        db: DatabaseProtocol,
        table: str,
        row_to_entity: RowMapper[T],
        config: "Config",
        **kwargs: Any,
    ) -> "EntityRepository[T]":
        """Build a repository using the configured primary key and page size.

        Keyword arguments override the configured values.
        """
        kwargs.setdefault("primary_key", config.primary_key)
        kwargs.setdefault("page_size", config.default_page_size)
        return cls(db, table, row_to_entity, **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.table!r}, primary_key={self.primary_key!r})"

    # ── Mapping ───────────────────────────────────────────

    def to_entity(self, row: Row) -> T:
        """Convert one row to an entity."""
        return self._row_to_entity(row)

    def to_collection(self, rows: Iterable[Row]) -> GenericCollection[T]:
        """Convert rows to a collection of entities."""
        return self._collection_factory([self.to_entity(row) for row in rows])

    def _select_by(self, criteria: Criteria | None) -> SelectQueryProtocol:
        query = self.query_builder.select()
        for column, value in (criteria or {}).items():
            query.where(column, "=", value)
        return query

    # ── Finders ───────────────────────────────────────────

    def find_all(self) -> GenericCollection[T]:
        """Get every row of the table as a collection."""
        return self.to_collection(self.query_builder.select().get())

    def find_by_id(self, id: EntityId) -> T | None:
        """Get an entity by primary key.

        Returns:
            The entity, or None if no row matched.
        """
        row = self.query_builder.select().where(self.primary_key, "=", id).get_one()
        return self.to_entity(row) if row is not None else None

    def find_by_ids(self, ids: Iterable[EntityId]) -> GenericCollection[T]:
        """Get the entities whose primary key is in ``ids``.

        Ids without a row are silently left out.
        """
        ids = list(ids)
        if not ids:
            return self.to_collection([])
        return self.to_collection(
            self.query_builder.select().where_in(self.primary_key, ids).get()
        )

    def find_by(self, criteria: Criteria) -> GenericCollection[T]:
        """Get the entities matching every ``column = value`` pair."""
        return self.to_collection(self._select_by(criteria).get())

    def find_one_by(self, criteria: Criteria) -> T | None:
        """Get the matching entity with the lowest primary key, or None."""
        row = self._select_by(criteria).order_by(self.primary_key).get_one()
        return self.to_entity(row) if row is not None else None

    def find_by_like(self, fields: str | Sequence[str], pattern: str) -> GenericCollection[T]:
        """Get the entities where any of ``fields`` contains ``pattern``.

        No fields matches nothing.
        """
        columns = [fields] if isinstance(fields, str) else list(fields)
        if not columns:
            return self.to_collection([])

        def contains(group: Any) -> None:
            for column in columns:
                group.where(column, "LIKE", f"%{pattern}%", "OR")

        return self.to_collection(self.query_builder.select().where_group(contains).get())

    def paginate(self, page: int = 1, limit: int | None = None) -> GenericCollection[T]:
        """Get one 1-indexed page of entities.

        Raises:
            InvalidPaginationError: If ``page < 1`` or ``limit <= 0``.
        """
        limit = self.page_size if limit is None else limit
        if page < 1:
            raise InvalidPaginationError(f"Page must be >= 1, got {page}")
        if limit <= 0:
            raise InvalidPaginationError(f"Limit must be > 0, got {limit}")
        return self.to_collection(self.query_builder.select().paginate(page, limit).get())

    # ── Counting ──────────────────────────────────────────

    def count_by(self, criteria: Criteria | None = None) -> int:
        """Count the rows matching ``criteria``; no criteria counts all rows."""
        return self._select_by(criteria).count()

    def count(self) -> int:
        """Count all rows of the table."""
        return self.query_builder.count()

    def exists(self, criteria: Criteria) -> bool:
        """Check whether any row matches ``criteria``."""
        return self._select_by(criteria).exists()

    # ── Mutations ─────────────────────────────────────────

    def create(self, data: dict[str, Any]) -> bool:
        """Insert one row.

        Returns:
            True if a row was inserted.
        """
        affected = self.query_builder.insert(data)
        logger.debug(f"Insert into {self.table}: affected={affected}")
        return affected > 0

    def bulk_insert(self, records: Sequence[dict[str, Any]]) -> bool:
        """Insert several rows sharing the columns of the first record.

        Returns:
            False for an empty ``records`` (nothing is executed), otherwise
            True if any row was inserted.

        Raises:
            RecordShapeError: If a record's keys differ from the first one.
        """
        if not records:
            return False

        columns = list(records[0].keys())
        expected = set(columns)
        for index, record in enumerate(records):
            if set(record) != expected:
                raise RecordShapeError(index, columns, list(record.keys()))

        rows = [[record[column] for column in columns] for record in records]
        affected = self.query_builder.insert_many(columns, rows)
        logger.debug(f"Bulk insert into {self.table}: records={len(records)}, affected={affected}")
        return affected > 0

    def update(self, id: EntityId, data: dict[str, Any]) -> bool:
        """Update the row with primary key ``id``.

        Returns:
            True if a row was updated.
        """
        affected = self.query_builder.update(data, self.primary_key, id)
        logger.debug(f"Update {self.table} #{id}: affected={affected}")
        return affected > 0

    def delete(self, id: EntityId) -> bool:
        """Delete the row with primary key ``id``.

        Returns:
            True if a row was deleted.
        """
        affected = self.query_builder.delete(self.primary_key, id)
        logger.debug(f"Delete {self.table} #{id}: affected={affected}")
        return affected > 0

    # ── Transactions ──────────────────────────────────────

    def begin_transaction(self) -> None:
        """Begin a transaction on the underlying database."""
        self.db.begin_transaction()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.db.commit()

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self.db.rollback()

    @contextmanager
    def transaction(self) -> Iterator["EntityRepository[T]"]:
        """Run a block in a transaction; commit on success, roll back on error."""
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()
