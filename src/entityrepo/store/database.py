"""SQLite database connection manager for entityrepo."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

from loguru import logger

from ..core.exceptions import DatabaseError, TransactionError

if TYPE_CHECKING:
    from ..core.config import Config

MEMORY = ":memory:"


class Database:
    """SQLite database connection manager.

    The connection runs in autocommit mode: every statement outside an
    explicit ``begin_transaction()`` is committed on its own.
    """

    def __init__(self, path: Path | str, schema: str | None = None):
        """Initialize database with path.

        Args:
            path: Path to the SQLite database file, or ``":memory:"``.
            schema: Optional SQL script executed right after connecting.
        """
        self.path = path if str(path) == MEMORY else Path(path)
        self.schema = schema
        self._connection: sqlite3.Connection | None = None

    @classmethod
    def from_config(cls, config: "Config", schema: str | None = None) -> "Database":
        """Build a database for the configured path."""
        return cls(config.db_path, schema=schema)

    @property
    def connected(self) -> bool:
        """Check whether a connection is open."""
        return self._connection is not None

    @property
    def in_transaction(self) -> bool:
        """Check whether an explicit transaction is active."""
        return self._connection is not None and self._connection.in_transaction

    def connect(self) -> None:
        """Open the connection and run the schema script, if any."""
        if self._connection is not None:
            return
        try:
            if isinstance(self.path, Path):
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(
                str(self.path), isolation_level=None, check_same_thread=False
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
        except Exception as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

        logger.info(f"Database connected: {self.path}")
        if self.schema:
            self.executescript(self.schema)

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            try:
                self._connection.close()
            except Exception as e:
                raise DatabaseError(f"Failed to close database: {e}") from e
            finally:
                self._connection = None
            logger.info(f"Database closed: {self.path}")

    def _require_connection(self) -> sqlite3.Connection:
        if not self._connection:
            raise DatabaseError("Database not connected")
        return self._connection

    # ── Transactions ──────────────────────────────────────

    def begin_transaction(self) -> None:
        """Start an explicit transaction.

        Raises:
            TransactionError: If a transaction is already active.
        """
        self._control("BEGIN")

    def commit(self) -> None:
        """Commit the active transaction.

        Raises:
            TransactionError: If no transaction is active.
        """
        self._control("COMMIT")

    def rollback(self) -> None:
        """Roll back the active transaction.

        Raises:
            TransactionError: If no transaction is active.
        """
        self._control("ROLLBACK")
        logger.warning(f"Transaction rolled back: {self.path}")

    def _control(self, statement: str) -> None:
        connection = self._require_connection()
        try:
            connection.execute(statement)
        except sqlite3.Error as e:
            raise TransactionError(f"{statement} failed: {e}") from e
        logger.debug(f"Transaction control: {statement}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Context manager for database transactions.

        Yields:
            A cursor for executing SQL statements.

        Raises:
            DatabaseError: If connection is not available or transaction fails.
        """
        connection = self._require_connection()
        self.begin_transaction()
        cursor = connection.cursor()
        try:
            yield cursor
            self.commit()
        except Exception as e:
            self.rollback()
            if isinstance(e, DatabaseError):
                raise
            raise DatabaseError(f"Transaction failed: {e}") from e
        finally:
            cursor.close()

    # ── Statements ────────────────────────────────────────

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Execute a SQL query.

        Args:
            sql: SQL statement to execute.
            params: Positional parameters for the SQL statement.

        Returns:
            A cursor with the query results and ``rowcount``.

        Raises:
            DatabaseError: If connection is not available or query fails.
        """
        connection = self._require_connection()
        logger.debug(f"SQL: {sql} [{len(params)} params]")
        try:
            return connection.execute(sql, tuple(params))
        except Exception as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    def executemany(self, sql: str, seq_of_params: Iterable[Sequence[Any]]) -> sqlite3.Cursor:
        """Execute one SQL statement once per parameter set.

        Args:
            sql: SQL statement to execute.
            seq_of_params: Positional parameters for each execution.

        Returns:
            A cursor whose ``rowcount`` totals every execution.

        Raises:
            DatabaseError: If connection is not available or query fails.
        """
        connection = self._require_connection()
        logger.debug(f"SQL (many): {sql}")
        try:
            return connection.executemany(sql, (tuple(params) for params in seq_of_params))
        except Exception as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements.

        Args:
            sql: SQL script with multiple statements.

        Raises:
            DatabaseError: If connection is not available or script fails.
        """
        connection = self._require_connection()
        try:
            connection.executescript(sql)
        except Exception as e:
            raise DatabaseError(f"Script execution failed: {e}") from e
