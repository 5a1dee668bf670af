"""Criteria-based query construction and execution for a single table.

QueryBuilder is the query collaborator used by EntityRepository. It turns
structured predicates into parameterized SQLite statements and runs them
through a Database. Identifiers are quoted with SQLAlchemy's SQLite
identifier preparer; values are always bound as parameters.

Example:
    users = QueryBuilder(db, "users", alias="u")
    rows = (
        users.select()
        .where("u.active", "=", 1)
        .where_group(lambda q: q.where("name", "LIKE", "%an%", "OR").where("email", "LIKE", "%an%", "OR"))
        .order_by("id")
        .paginate(2, 10)
        .get()
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from sqlalchemy.dialects import sqlite

from ..core.exceptions import QueryError
from ..core.types import Row

if TYPE_CHECKING:
    from ..app.protocols import DatabaseProtocol

_PREPARER = sqlite.dialect().identifier_preparer

OPERATORS = frozenset({"=", "!=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE"})
BOOLEANS = frozenset({"AND", "OR"})


def quote_identifier(name: str) -> str:
    """Quote a column or table name, keeping ``alias.column`` qualification."""
    if not name:
        raise QueryError("Identifier must not be empty")
    return ".".join(_PREPARER.quote(part) for part in name.split("."))


def _boolean(value: str) -> str:
    boolean = value.upper()
    if boolean not in BOOLEANS:
        raise QueryError(f"Unsupported logical join: {value!r}")
    return boolean


@dataclass
class _Clause:
    boolean: str
    sql: str
    params: list[Any] = field(default_factory=list)


class ClauseBuilder:
    """Collects WHERE predicates joined by AND/OR."""

    def __init__(self) -> None:
        self._clauses: list[_Clause] = []

    def where(self, column: str, operator: str, value: Any, boolean: str = "AND") -> "ClauseBuilder":
        """Add a ``column <operator> value`` predicate.

        ``None`` compared with ``=`` or ``!=``/``<>`` becomes IS [NOT] NULL.

        Raises:
            QueryError: If the operator or logical join is not supported.
        """
        op = operator.upper()
        if op not in OPERATORS:
            raise QueryError(f"Unsupported operator: {operator!r}")
        target = quote_identifier(column)
        if value is None and op in {"=", "!=", "<>"}:
            sql = f"{target} IS NULL" if op == "=" else f"{target} IS NOT NULL"
            self._clauses.append(_Clause(_boolean(boolean), sql))
        else:
            self._clauses.append(_Clause(_boolean(boolean), f"{target} {op} ?", [value]))
        return self

    def where_in(self, column: str, values: Iterable[Any], boolean: str = "AND") -> "ClauseBuilder":
        """Add a ``column IN (...)`` predicate. No values matches nothing."""
        values = list(values)
        if not values:
            self._clauses.append(_Clause(_boolean(boolean), "1 = 0"))
            return self
        placeholders = ", ".join("?" for _ in values)
        self._clauses.append(
            _Clause(_boolean(boolean), f"{quote_identifier(column)} IN ({placeholders})", values)
        )
        return self

    def where_group(
        self, callback: Callable[["ClauseBuilder"], Any], boolean: str = "AND"
    ) -> "ClauseBuilder":
        """Add a parenthesised group of predicates built by ``callback``."""
        group = ClauseBuilder()
        callback(group)
        sql, params = group._compile_conditions()
        if sql:
            self._clauses.append(_Clause(_boolean(boolean), f"({sql})", params))
        return self

    def _compile_conditions(self) -> tuple[str, list[Any]]:
        parts: list[str] = []
        params: list[Any] = []
        for index, clause in enumerate(self._clauses):
            parts.append(clause.sql if index == 0 else f"{clause.boolean} {clause.sql}")
            params.extend(clause.params)
        return " ".join(parts), params

    def _compile_where(self) -> tuple[str, list[Any]]:
        sql, params = self._compile_conditions()
        return (f" WHERE {sql}" if sql else ""), params


class SelectQuery(ClauseBuilder):
    """A SELECT statement against one table."""

    def __init__(self, db: "DatabaseProtocol", source: str, columns: Sequence[str] | None = None):
        super().__init__()
        self._db = db
        self._source = source
        self._columns = ", ".join(quote_identifier(c) for c in columns) if columns else "*"
        self._order: list[str] = []
        self._limit: int | None = None
        self._offset: int | None = None

    def order_by(self, column: str, direction: str = "ASC") -> "SelectQuery":
        """Append an ORDER BY term."""
        direction = direction.upper()
        if direction not in {"ASC", "DESC"}:
            raise QueryError(f"Unsupported sort direction: {direction!r}")
        self._order.append(f"{quote_identifier(column)} {direction}")
        return self

    def limit(self, count: int) -> "SelectQuery":
        """Return at most ``count`` rows."""
        if count < 0:
            raise QueryError(f"Limit must not be negative: {count}")
        self._limit = count
        return self

    def offset(self, count: int) -> "SelectQuery":
        """Skip the first ``count`` rows."""
        if count < 0:
            raise QueryError(f"Offset must not be negative: {count}")
        self._offset = count
        return self

    def paginate(self, page: int, per_page: int) -> "SelectQuery":
        """Limit to one 1-indexed page of ``per_page`` rows."""
        if page < 1 or per_page < 1:
            raise QueryError(f"Invalid page {page} of size {per_page}")
        return self.limit(per_page).offset((page - 1) * per_page)

    def to_sql(self) -> tuple[str, list[Any]]:
        """Compile the query to SQL and positional parameters."""
        return self._compile(self._columns)

    def _compile(self, columns: str) -> tuple[str, list[Any]]:
        where, params = self._compile_where()
        sql = f"SELECT {columns} FROM {self._source}{where}"
        if self._order:
            sql += " ORDER BY " + ", ".join(self._order)
        if self._limit is not None or self._offset is not None:
            # SQLite needs a LIMIT before OFFSET; -1 means unbounded
            sql += " LIMIT ?"
            params.append(self._limit if self._limit is not None else -1)
            if self._offset:
                sql += " OFFSET ?"
                params.append(self._offset)
        return sql, params

    def get(self) -> list[Row]:
        """Execute and return all rows as dictionaries."""
        sql, params = self.to_sql()
        return [dict(row) for row in self._db.execute(sql, params).fetchall()]

    def get_one(self) -> Row | None:
        """Execute with LIMIT 1 and return the first row or None."""
        self.limit(1)
        sql, params = self.to_sql()
        row = self._db.execute(sql, params).fetchone()
        return dict(row) if row is not None else None

    def count(self) -> int:
        """Count matching rows with a COUNT(*) query."""
        where, params = self._compile_where()
        sql = f"SELECT COUNT(*) AS count FROM {self._source}{where}"
        row = self._db.execute(sql, params).fetchone()
        return int(row["count"]) if row is not None else 0

    def exists(self) -> bool:
        """Check for at least one matching row without fetching columns."""
        self.limit(1)
        sql, params = self._compile("1")
        return self._db.execute(sql, params).fetchone() is not None


class QueryBuilder:
    """Builds and executes queries against a single table."""

    def __init__(self, db: "DatabaseProtocol", table: str, alias: str | None = None):
        """Initialize the builder.

        Args:
            db: Database that executes the statements.
            table: Table name.
            alias: Optional alias usable in qualified column names.
        """
        self.db = db
        self.table = table
        self.alias = alias
        self._table_sql = quote_identifier(table)
        self._source = (
            f"{self._table_sql} AS {quote_identifier(alias)}" if alias else self._table_sql
        )

    def select(self, columns: Sequence[str] | None = None) -> SelectQuery:
        """Start a new SELECT query."""
        return SelectQuery(self.db, self._source, columns)

    def insert(self, data: dict[str, Any]) -> int:
        """Insert one row and return the affected-row count."""
        if not data:
            sql = f"INSERT INTO {self._table_sql} DEFAULT VALUES"
            return self.db.execute(sql).rowcount
        columns = ", ".join(quote_identifier(c) for c in data)
        placeholders = ", ".join("?" for _ in data)
        sql = f"INSERT INTO {self._table_sql} ({columns}) VALUES ({placeholders})"
        return self.db.execute(sql, list(data.values())).rowcount

    def insert_many(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> int:
        """Insert several rows and return the total affected-row count.

        The single-row statement runs once per row, so the number of rows is
        not bounded by SQLite's variable limit.
        """
        if not rows:
            return 0
        column_sql = ", ".join(quote_identifier(c) for c in columns)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {self._table_sql} ({column_sql}) VALUES ({placeholders})"
        return self.db.executemany(sql, rows).rowcount

    def update(self, data: dict[str, Any], key: str, value: Any) -> int:
        """Update rows where ``key = value`` and return the affected-row count.

        Raises:
            QueryError: If ``data`` is empty.
        """
        if not data:
            raise QueryError("No columns to update")
        assignments = ", ".join(f"{quote_identifier(c)} = ?" for c in data)
        sql = f"UPDATE {self._table_sql} SET {assignments} WHERE {quote_identifier(key)} = ?"
        return self.db.execute(sql, [*data.values(), value]).rowcount

    def delete(self, key: str, value: Any) -> int:
        """Delete rows where ``key = value`` and return the affected-row count."""
        sql = f"DELETE FROM {self._table_sql} WHERE {quote_identifier(key)} = ?"
        return self.db.execute(sql, [value]).rowcount

    def count(self) -> int:
        """Count all rows in the table."""
        return self.select().count()
