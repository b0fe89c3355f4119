"""Shared pytest fixtures: an in-memory SQLite store per test."""

from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "0"
os.environ["SALE_TOTAL_POLICY"] = "verify"

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402

from core import data_repository  # noqa: E402
from core import product_service  # noqa: E402
from core.schema import ensure_schema  # noqa: E402


@pytest.fixture(autouse=True)
def sqlite_engine(monkeypatch):
    monkeypatch.setattr(data_repository, "DATABASE_URL", "sqlite://")
    get_engine = data_repository.get_engine
    get_engine.cache_clear()
    engine = get_engine()
    ensure_schema(engine)
    yield engine
    engine.dispose()
    get_engine.cache_clear()


@pytest.fixture
def make_product():
    def _make(product_id: str, *, stock: int = 10, sale_price: float = 5.0, name: str | None = None, barcode: str | None = None):
        return product_service.add_product(
            {
                "name": name or f"Produit {product_id}",
                "barcode": barcode or f"code-{product_id}",
                "purchase_price": 1.0,
                "sale_price": sale_price,
                "stock": stock,
            },
            product_id=product_id,
        )

    return _make
