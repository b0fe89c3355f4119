import pytest

from core.database_url import get_database_url
from core.settings import AppSettings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "SQLITE_PATH",
        "POSTGRES_DB",
        "POSTGRES_HOST",
        "POSTGRES_USER",
        "POSTGRES_PASSWORD",
        "DB_HOST",
        "DB_NAME",
        "DB_PORT",
        "SALE_TOTAL_POLICY",
        "SEED_DEMO_DATA",
        "APP_ENV",
        "ENV",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_database_url_defaults_to_local_sqlite(clean_env):
    assert get_database_url() == "sqlite:///local.db"


def test_database_url_prefers_explicit_value(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite:///tmp/caisse.db")

    assert get_database_url() == "sqlite:///tmp/caisse.db"


def test_database_url_builds_postgres_from_parts(clean_env):
    clean_env.setenv("POSTGRES_USER", "caisse")
    clean_env.setenv("POSTGRES_PASSWORD", "p@ss word")
    clean_env.setenv("DB_HOST", "db")

    assert get_database_url() == "postgresql+psycopg2://caisse:p%40ss+word@db:5432/caisse"


def test_settings_defaults(clean_env):
    settings = AppSettings.load()

    assert settings.sale_total_policy == "verify"
    assert settings.app_env == "development"
    assert settings.seed_demo_data is True


def test_settings_reject_unknown_total_policy(clean_env):
    clean_env.setenv("SALE_TOTAL_POLICY", "guess")

    with pytest.raises(ValueError):
        AppSettings.load()


def test_settings_production_does_not_seed(clean_env):
    clean_env.setenv("APP_ENV", "production")
    clean_env.setenv("SALE_TOTAL_POLICY", "recompute")

    settings = AppSettings.load()

    assert settings.seed_demo_data is False
    assert settings.sale_total_policy == "recompute"
