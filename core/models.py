"""Entités du domaine caisse."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass
class Product:
    id: str
    name: str
    barcode: str
    purchase_price: float
    sale_price: float
    stock: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Product":
        return cls(
            id=str(row["id"]),
            name=str(row["name"]),
            barcode=str(row["barcode"]),
            purchase_price=float(row["purchase_price"]),
            sale_price=float(row["sale_price"]),
            stock=int(row["stock"]),
        )


@dataclass(frozen=True)
class SaleLine:
    """Ligne demandée à l'encaissement (avant enregistrement)."""

    product_id: str
    product_name: str
    quantity: int
    sale_price: float

    @property
    def subtotal(self) -> float:
        return self.quantity * self.sale_price


@dataclass(frozen=True)
class SaleItem:
    """Ligne enregistrée: nom et prix sont des copies figées au moment de la vente."""

    sale_id: str
    product_id: str
    product_name: str
    quantity: int
    sale_price: float

    @property
    def subtotal(self) -> float:
        return self.quantity * self.sale_price

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SaleItem":
        return cls(
            sale_id=str(row["sale_id"]),
            product_id=str(row["product_id"]),
            product_name=str(row["product_name"]),
            quantity=int(row["quantity"]),
            sale_price=float(row["sale_price"]),
        )


@dataclass
class Sale:
    id: str
    date: datetime
    total: float
    items: list[SaleItem] = field(default_factory=list)


def format_timestamp(value: datetime) -> str:
    """Horodatage ISO-8601 UTC à la milliseconde (format stocké en base).

    Une date naïve est considérée comme déjà exprimée en UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    raw = str(value)
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


__all__ = ["Product", "SaleLine", "SaleItem", "Sale", "format_timestamp", "parse_timestamp"]
