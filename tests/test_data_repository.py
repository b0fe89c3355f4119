import pandas as pd
import pandas.testing as pd_testing
from sqlalchemy import event, text

from core import data_repository
from core.repositories import SqlUnitOfWork


class _DriverOnlyConnection:
    """Connexion dont le driver refuse les TextClause et n'accepte que du SQL brut."""

    def __init__(self, statements):
        self._statements = statements

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, statement):
        raise TypeError("expected string or bytes-like object, got 'TextClause'")

    def exec_driver_sql(self, sql_text):
        self._statements.append(sql_text)
        return _StockRows()


class _StockRows:
    def keys(self):
        return ["id", "stock"]

    def fetchall(self):
        return [("p1", 12)]


class _DriverOnlyEngine:
    def __init__(self):
        self.statements = []

    def begin(self):
        return _DriverOnlyConnection(self.statements)


def test_query_df_falls_back_to_literal_sql_for_strict_drivers(monkeypatch):
    engine = _DriverOnlyEngine()
    monkeypatch.setattr(data_repository, "get_engine", lambda: engine)

    df = data_repository.query_df(
        text("SELECT id, stock FROM products WHERE id = :pid"),
        params={"pid": "p1"},
    )

    assert engine.statements == ["SELECT id, stock FROM products WHERE id = 'p1'"]
    pd_testing.assert_frame_equal(df, pd.DataFrame([("p1", 12)], columns=["id", "stock"]))


def test_query_df_empty_result_keeps_columns():
    df = data_repository.query_df("SELECT id, name FROM products")

    assert df.empty
    assert list(df.columns) == ["id", "name"]


def test_sqlite_engine_enforces_foreign_keys(sqlite_engine):
    with sqlite_engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_write_units_take_the_lock_at_begin(sqlite_engine):
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("BEGIN"):
            statements.append(statement)

    event.listen(sqlite_engine, "before_cursor_execute", capture)
    try:
        with SqlUnitOfWork() as uow:
            uow.products.count()
        with SqlUnitOfWork(write=True) as uow:
            uow.products.count()
    finally:
        event.remove(sqlite_engine, "before_cursor_execute", capture)

    assert statements == ["BEGIN", "BEGIN IMMEDIATE"]
