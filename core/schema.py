"""Tables de la caisse (produits, ventes, lignes de vente)."""

from __future__ import annotations

import sqlalchemy as sa

from .data_repository import get_engine

metadata = sa.MetaData()

products = sa.Table(
    "products",
    metadata,
    sa.Column("id", sa.Text, primary_key=True),
    sa.Column("name", sa.Text, nullable=False),
    sa.Column("barcode", sa.Text, nullable=False, unique=True),
    sa.Column("purchase_price", sa.Float, nullable=False),
    sa.Column("sale_price", sa.Float, nullable=False),
    sa.Column("stock", sa.Integer, nullable=False, server_default="0"),
    sa.CheckConstraint("stock >= 0", name="ck_products_stock_positive"),
)

sales = sa.Table(
    "sales",
    metadata,
    sa.Column("id", sa.Text, primary_key=True),
    sa.Column("date", sa.Text, nullable=False),  # ISO-8601 UTC, précision milliseconde
    sa.Column("total", sa.Float, nullable=False),
)

sale_items = sa.Table(
    "sale_items",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
    sa.Column(
        "sale_id",
        sa.Text,
        sa.ForeignKey("sales.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Pas de cascade: un produit vendu ne peut pas disparaître du catalogue.
    sa.Column("product_id", sa.Text, sa.ForeignKey("products.id"), nullable=False, index=True),
    sa.Column("product_name", sa.Text, nullable=False),
    sa.Column("quantity", sa.Integer, nullable=False),
    sa.Column("sale_price", sa.Float, nullable=False),
    sa.CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
)


def ensure_schema(engine: sa.engine.Engine | None = None) -> None:
    """Crée les tables manquantes (idempotent)."""
    metadata.create_all(engine or get_engine())


__all__ = ["metadata", "products", "sales", "sale_items", "ensure_schema"]
