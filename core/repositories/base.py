"""
Base Repository - table gateway and Unit of Work over SQLAlchemy connections.

Every repository built by a unit of work shares its connection, so all the
reads and writes of one business operation land in a single transaction.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine

from core.data_repository import WRITE_OPTION, get_engine


class TableGateway:
    """Row-level access to one table through an open connection."""

    def __init__(self, connection: Connection, table: sa.Table):
        self._connection = connection
        self._table = table
        pk_columns = list(table.primary_key.columns)
        if len(pk_columns) != 1:
            raise ValueError(f"{table.name}: a single-column primary key is required")
        self._pk = pk_columns[0]

    @property
    def table(self) -> sa.Table:
        return self._table

    def insert_row(self, values: Mapping[str, Any]) -> Any:
        """Insert one row and return its primary key."""
        result = self._connection.execute(sa.insert(self._table).values(**values))
        inserted = result.inserted_primary_key
        return inserted[0] if inserted else None

    def update_row(self, key: Any, values: Mapping[str, Any], *criteria: Any) -> int:
        statement = sa.update(self._table).where(self._pk == key, *criteria).values(**values)
        return self._connection.execute(statement).rowcount

    def delete_rows(self, *criteria: Any) -> int:
        if not criteria:
            raise ValueError("delete_rows requires at least one criterion")
        return self._connection.execute(sa.delete(self._table).where(*criteria)).rowcount

    def get_row(self, key: Any) -> dict[str, Any] | None:
        statement = sa.select(self._table).where(self._pk == key)
        row = self._connection.execute(statement).fetchone()
        return dict(row._mapping) if row is not None else None

    def select_rows(
        self,
        *criteria: Any,
        order_by: Sequence[Any] | None = None,
    ) -> list[dict[str, Any]]:
        statement = sa.select(self._table)
        if criteria:
            statement = statement.where(*criteria)
        if order_by:
            statement = statement.order_by(*order_by)
        return [dict(row._mapping) for row in self._connection.execute(statement)]


class SqlUnitOfWork:
    """
    SQLAlchemy implementation of Unit of Work.

    Usage:
        with SqlUnitOfWork() as uow:
            uow.sales.add(...)
            uow.products.decrement_stock(...)
            uow.commit()

    Leaving the block without ``commit()`` (or through an exception) rolls
    every write back. ``write=True`` takes the SQLite write lock at ``BEGIN``
    (``BEGIN IMMEDIATE``) so concurrent writers queue instead of failing.
    """

    def __init__(self, engine: Engine | None = None, *, write: bool = False):
        self._engine = engine
        self._write = write
        self._connection: Connection | None = None
        self._transaction = None

    def __enter__(self) -> "SqlUnitOfWork":
        # Import local: les dépôts importent ce module.
        from .products import SqlProductRepository
        from .sales import SqlSaleRepository

        engine = self._engine or get_engine()
        self._connection = engine.connect()
        if self._write:
            self._connection.execution_options(**{WRITE_OPTION: True})
        self._transaction = self._connection.begin()
        self.products = SqlProductRepository(self._connection)
        self.sales = SqlSaleRepository(self._connection)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if self._transaction is not None and self._transaction.is_active:
                self.rollback()
        finally:
            if self._connection is not None:
                self._connection.close()
            self._connection = None
            self._transaction = None

    def commit(self) -> None:
        if self._transaction is not None:
            self._transaction.commit()

    def rollback(self) -> None:
        if self._transaction is not None:
            self._transaction.rollback()
