"""Configuration applicative backend (API FastAPI) basée sur core.settings.AppSettings."""

from __future__ import annotations

import logging
import os

from core.settings import AppSettings as CoreSettings


class Settings(CoreSettings):
    log_level: str = "INFO"

    @staticmethod
    def load() -> "Settings":
        core = CoreSettings.load()
        log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = "INFO"
        obj = Settings(
            app_env=core.app_env,
            database_url=core.database_url,
            db_pool_size=core.db_pool_size,
            db_pool_max_overflow=core.db_pool_max_overflow,
            sale_total_policy=core.sale_total_policy,
            seed_demo_data=core.seed_demo_data,
            cors_allowed_origins=core.cors_allowed_origins,
        )
        object.__setattr__(obj, "log_level", log_level)
        return obj
