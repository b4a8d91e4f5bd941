"""PostgreSQL user repository.

This adapter implements the UserRepository protocol on top of a
``users`` table, using psycopg 3 with a connection pool. All statements
are parameterized; identifiers are generated by the database.

Thread Safety:
    The pool hands each call its own connection. Update and delete use
    ``RETURNING`` so the existence check and the write are a single
    statement.

References:
    - https://www.psycopg.org/psycopg3/docs/advanced/pool.html
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg
from psycopg_pool import ConnectionPool

from user_registry.domain.entities.user import User, UserDraft
from user_registry.domain.value_objects.identifiers import UserId
from user_registry.ports.outbound import StorageError

logger = logging.getLogger(__name__)

CREATE_EXTENSION_SQL = "CREATE EXTENSION IF NOT EXISTS pgcrypto"

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        first_name TEXT NOT NULL,
        last_name  TEXT NOT NULL,
        biography  TEXT NOT NULL
    )
"""

INSERT_USER_SQL = """
    INSERT INTO users (first_name, last_name, biography)
    VALUES (%s, %s, %s)
    RETURNING id
"""

SELECT_USER_SQL = """
    SELECT id, first_name, last_name, biography
    FROM users
    WHERE id = %s
"""

SELECT_USERS_SQL = """
    SELECT id, first_name, last_name, biography
    FROM users
"""

UPDATE_USER_SQL = """
    UPDATE users
    SET first_name = %s, last_name = %s, biography = %s
    WHERE id = %s
    RETURNING id, first_name, last_name, biography
"""

DELETE_USER_SQL = """
    DELETE FROM users
    WHERE id = %s
    RETURNING id
"""


def _row_to_user(row: tuple) -> User:
    """Convert a (id, first_name, last_name, biography) row to a User."""
    user_id, first_name, last_name, biography = row
    return User(
        id=UserId(user_id),
        first_name=first_name,
        last_name=last_name,
        biography=biography,
    )


class PostgresUserRepository:
    """User storage backed by a PostgreSQL ``users`` table."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Initialize the repository.

        Args:
            pool: Open psycopg connection pool. The repository owns it
                and closes it in ``close``.
        """
        self._pool = pool

    @classmethod
    def connect(
        cls,
        database_url: str,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 10.0,
    ) -> PostgresUserRepository:
        """Open a connection pool and wrap it in a repository.

        Args:
            database_url: libpq connection string or URL.
            min_size: Connections kept open by the pool.
            max_size: Upper bound on pooled connections.
            timeout: Seconds to wait for a connection.

        Raises:
            StorageError: If the pool cannot reach the database.
        """
        try:
            pool = ConnectionPool(
                conninfo=database_url,
                min_size=min_size,
                max_size=max_size,
                timeout=timeout,
                open=False,
            )
            pool.open(wait=True, timeout=timeout)
        except psycopg.Error as e:
            raise StorageError(f"Unable to connect to database: {e}") from e
        return cls(pool)

    @property
    def backend_name(self) -> str:
        return "postgres"

    @contextmanager
    def _connection(self, operation: str) -> Iterator[psycopg.Connection]:
        """Borrow a pooled connection, translating driver errors."""
        try:
            with self._pool.connection() as conn:
                yield conn
        except psycopg.Error as e:
            raise StorageError(f"{operation} failed: {e}") from e

    def initialize_schema(self) -> None:
        """Create the pgcrypto extension and ``users`` table if absent."""
        with self._connection("schema bootstrap") as conn:
            conn.execute(CREATE_EXTENSION_SQL)
            conn.execute(CREATE_TABLE_SQL)
        logger.info("Users table ready")

    def create(self, draft: UserDraft) -> User:
        with self._connection("insert user") as conn:
            row = conn.execute(
                INSERT_USER_SQL,
                (draft.first_name, draft.last_name, draft.biography),
            ).fetchone()
        if row is None:
            raise StorageError("insert user returned no id")
        return draft.with_id(UserId(row[0]))

    def get_by_id(self, user_id: UserId) -> Optional[User]:
        with self._connection("select user") as conn:
            row = conn.execute(SELECT_USER_SQL, (user_id,)).fetchone()
        return _row_to_user(row) if row else None

    def list_all(self) -> list[User]:
        with self._connection("list users") as conn:
            rows = conn.execute(SELECT_USERS_SQL).fetchall()
        return [_row_to_user(row) for row in rows]

    def update(self, user_id: UserId, draft: UserDraft) -> Optional[User]:
        with self._connection("update user") as conn:
            row = conn.execute(
                UPDATE_USER_SQL,
                (draft.first_name, draft.last_name, draft.biography, user_id),
            ).fetchone()
        return _row_to_user(row) if row else None

    def delete(self, user_id: UserId) -> bool:
        with self._connection("delete user") as conn:
            row = conn.execute(DELETE_USER_SQL, (user_id,)).fetchone()
        return row is not None

    def ping(self) -> bool:
        try:
            with self._connection("ping") as conn:
                conn.execute("SELECT 1")
        except StorageError as e:
            logger.warning("Database ping failed: %s", e)
            return False
        return True

    def close(self) -> None:
        self._pool.close()
