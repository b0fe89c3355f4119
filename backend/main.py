"""FastAPI application exposing the point-of-sale features."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from backend.api import catalog as catalog_router
from backend.api import dashboard as dashboard_router
from backend.api import sales as sales_router
from backend.api.errors import request_validation_handler
from backend.settings import Settings
from core.demo_data import seed_demo_data
from core.schema import ensure_schema

logger = logging.getLogger(__name__)

_DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8501",
]


def _bootstrap_database(settings: Settings) -> None:
    """Crée les tables et, si demandé, le jeu de démonstration."""

    ensure_schema()
    if settings.seed_demo_data and seed_demo_data():
        logger.info("Catalogue vide: données de démonstration chargées")


@lru_cache
def create_app() -> FastAPI:
    """Construit l'application FastAPI ainsi que tous les routeurs de domaine."""

    settings = Settings.load()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        _bootstrap_database(settings)
        yield

    app = FastAPI(
        title="Caisse API",
        version="1.0.0",
        description="""
## API de caisse et de gestion de stock

- **Catalogue** : CRUD produits, unicité des codes-barres
- **Ventes** : enregistrement atomique (décrément du stock) et annulation (remise en stock)
- **Tableau de bord** : chiffre d'affaires, ventes par jour, stocks bas
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    allowed_origins = settings.cors_allowed_origins or _DEFAULT_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(catalog_router.router)
    app.include_router(sales_router.router)
    app.include_router(dashboard_router.router)

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    """Lance l'API avec uvicorn (``caisse-api`` ou ``python -m backend.main``)."""

    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
    )


if __name__ == "__main__":
    run()
