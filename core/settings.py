"""Configuration centralisée (backend core) avec validation minimale."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

SALE_TOTAL_POLICIES: tuple[str, ...] = ("verify", "trust", "recompute")


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} doit être un entier (reçu {raw!r}).") from exc


@dataclass(frozen=True)
class AppSettings:
    app_env: str = "development"
    database_url: str = ""
    db_pool_size: int = 10
    db_pool_max_overflow: int = 20
    sale_total_policy: str = "verify"
    seed_demo_data: bool = False
    cors_allowed_origins: list[str] = None

    @staticmethod
    def load() -> "AppSettings":
        load_dotenv(override=False)

        app_env = os.getenv("APP_ENV", os.getenv("ENV", "development")).strip().lower()
        policy = os.getenv("SALE_TOTAL_POLICY", "verify").strip().lower()
        if policy not in SALE_TOTAL_POLICIES:
            raise ValueError(
                f"SALE_TOTAL_POLICY invalide: {policy!r} (attendu: {', '.join(SALE_TOTAL_POLICIES)})."
            )

        cors_raw = os.getenv("CORS_ALLOWED_ORIGINS")
        cors = [entry.strip() for entry in cors_raw.split(",") if entry.strip()] if cors_raw else []
        return AppSettings(
            app_env=app_env,
            database_url=os.getenv("DATABASE_URL", "").strip(),
            db_pool_size=_int_env("DB_POOL_SIZE", 10),
            db_pool_max_overflow=_int_env("DB_POOL_MAX_OVERFLOW", 20),
            sale_total_policy=policy,
            seed_demo_data=_bool_env("SEED_DEMO_DATA", default=app_env in {"development", "dev"}),
            cors_allowed_origins=cors,
        )
