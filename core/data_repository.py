from functools import lru_cache  # Cache standard pour l'engine

import pandas as pd  # Bibliothèque de manipulation de données tabulaires
from sqlalchemy import create_engine, event, text  # Création d'engine et requêtes SQL
from sqlalchemy.engine import Engine  # Type du moteur SQLAlchemy
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.elements import ClauseElement, TextClause  # Types des expressions SQLAlchemy

from .database_url import get_database_url  # Fonction pour récupérer l'URL de base de données
from .settings import AppSettings

SETTINGS = AppSettings.load()
DATABASE_URL = SETTINGS.database_url or get_database_url()  # Construit l'URL de connexion depuis l'environnement
POOL_SIZE = SETTINGS.db_pool_size
POOL_MAX_OVERFLOW = SETTINGS.db_pool_max_overflow
SQLITE_BUSY_TIMEOUT = 30  # secondes d'attente derrière un autre écrivain
WRITE_OPTION = "caisse_write"  # option d'exécution posée par les unités d'écriture


def _is_memory_sqlite(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"} or "mode=memory" in url


def _configure_sqlite(engine: Engine, *, in_memory: bool) -> None:
    """Transactions explicites + clés étrangères pour SQLite (un seul écrivain)."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        # pysqlite ouvre ses transactions tout seul et trop tard: on reprend la main.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        # Une unité d'écriture prend le verrou dès le BEGIN: le second écrivain attend.
        if conn.get_execution_options().get(WRITE_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_engine(url: str) -> Engine:
    """Construit un moteur SQLAlchemy configuré selon le dialecte."""
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # SQLite en mémoire/file -> utiliser le pool par défaut adapté.
        in_memory = _is_memory_sqlite(url)
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
        if in_memory:
            # Une base mémoire n'existe que dans sa connexion: on la partage.
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        _configure_sqlite(engine, in_memory=in_memory)
        return engine

    kwargs.update(
        {
            "pool_size": max(1, POOL_SIZE),
            "max_overflow": max(0, POOL_MAX_OVERFLOW),
        }
    )
    return create_engine(url, **kwargs)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Retourne le moteur SQLAlchemy, mis en cache via functools."""
    return build_engine(DATABASE_URL)


def _normalize_statement(sql: str | ClauseElement) -> ClauseElement:
    if isinstance(sql, str):  # Si la requête est une chaîne brute
        return text(sql)  # Convertit en TextClause SQLAlchemy
    if isinstance(sql, ClauseElement):  # Si c'est déjà une expression SQL
        return sql  # Renvoie telle quelle
    raise TypeError("sql must be a string or SQLAlchemy ClauseElement")  # Erreur si type invalide


def query_df(sql: str | ClauseElement, params=None) -> pd.DataFrame:
    """Exécute une requête SELECT et retourne le résultat sous forme de DataFrame Pandas."""
    statement = _normalize_statement(sql)  # Normalise la requête fournie
    if params is not None and not isinstance(params, dict):  # Vérifie le type des paramètres
        raise TypeError("params must be a mapping when provided")

    # Pré-lie les paramètres pour simplifier les tentatives de repli en cas d'erreur
    bound_statement = statement.bindparams(**params) if params else statement

    eng = get_engine()  # Récupère le moteur SQL
    with eng.begin() as conn:  # Ouvre une transaction en lecture
        try:
            result = conn.execute(bound_statement)  # Exécute la requête préparée
        except TypeError as exc:  # Capture les erreurs de type liées au driver
            # Certains drivers peuvent exiger une chaîne brute.
            # Dans ce cas, on recompile la requête avec valeurs littérales pour utiliser exec_driver_sql.
            if isinstance(bound_statement, TextClause):
                compiled = bound_statement.compile(compile_kwargs={"literal_binds": True})
                result = conn.exec_driver_sql(str(compiled))
            else:  # Sinon, on ne sait pas récupérer proprement
                raise exc

        columns = list(result.keys())  # Récupère les noms de colonnes
        rows = result.fetchall()  # Récupère toutes les lignes

        if not rows:  # Si aucune ligne n'est retournée
            return pd.DataFrame(columns=columns)  # Renvoie un DataFrame vide avec colonnes

        return pd.DataFrame([tuple(row) for row in rows], columns=columns)

