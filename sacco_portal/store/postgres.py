"""Direct PostgreSQL store."""

import logging
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from sacco_portal.exceptions import StoreError
from sacco_portal.store.base import RelationalStore, Row

logger = logging.getLogger(__name__)


class PostgresStore(RelationalStore):
    """Relational store reached through a PostgreSQL connection.

    Each ``insert`` is one multi-row ``INSERT ... RETURNING *`` inside its
    own transaction, so a group is committed entirely or not at all.
    """

    def __init__(self, connection_string: str, connect_timeout: int = 10) -> None:
        self.connection_string = connection_string
        self.connect_timeout = connect_timeout
        self._conn: psycopg.Connection | None = None

    def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows in a single statement."""
        if not rows:
            return []

        columns = list(rows[0])
        for row in rows[1:]:
            if set(row) != set(columns):
                raise StoreError(f"Rows for {table} do not share the same columns")

        row_template = sql.SQL("({})").format(
            sql.SQL(", ").join([sql.Placeholder()] * len(columns))
        )
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES {values} RETURNING *").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join([row_template] * len(rows)),
        )
        params = [row[c] for row in rows for c in columns]

        try:
            conn = self._connection()
            with conn.transaction():
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    inserted = cur.fetchall()
        except psycopg.Error as e:
            raise StoreError(
                f"Insert into {table} failed: {e}",
                code=getattr(e, "sqlstate", None),
            ) from e

        logger.debug("Inserted %d rows into %s", len(inserted), table)
        return inserted

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Select rows with equality filters."""
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(table))
        params: list[Any] = []

        if filters:
            conditions = [
                sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder())
                for column in filters
            ]
            query += sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)
            params.extend(filters.values())
        if order_by:
            query += sql.SQL(" ORDER BY {} {}").format(
                sql.Identifier(order_by),
                sql.SQL("DESC" if descending else "ASC"),
            )
        if limit is not None:
            query += sql.SQL(" LIMIT {}").format(sql.Placeholder())
            params.append(limit)

        try:
            with self._connection().cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()
        except psycopg.Error as e:
            raise StoreError(
                f"Select from {table} failed: {e}",
                code=getattr(e, "sqlstate", None),
            ) from e

    def close(self) -> None:
        """Close the connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> psycopg.Connection:
        if self._conn is None or self._conn.closed:
            self._conn = psycopg.connect(
                self.connection_string,
                autocommit=True,
                row_factory=dict_row,
                connect_timeout=self.connect_timeout,
            )
        return self._conn
