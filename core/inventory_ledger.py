# inventory_ledger.py  # Enregistrement et annulation des ventes avec ajustement du stock
"""Grand livre de stock: chaque vente (et son annulation) est une transaction unique.

``record_sale`` insère la vente et ses lignes puis décrémente le stock;
``delete_sale`` remet en stock les quantités enregistrées puis supprime la vente.
Toute erreur annule la totalité des écritures de l'appel.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Mapping

from sqlalchemy import exc as sa_exc

from .data_repository import SETTINGS
from .models import Sale, SaleLine
from .repositories import SqlUnitOfWork

logger = logging.getLogger(__name__)

_TOTAL_TOLERANCE = Decimal("0.005")  # Écart toléré sur le total (demi-centime)


class LedgerError(Exception):
    """Échec d'une opération du grand livre; aucune écriture n'a été conservée."""


class SaleValidationError(LedgerError):
    """Levée lorsque la vente demandée est mal formée (rien n'est écrit)."""

    def __init__(self, message: str, fields: Mapping[str, list[str]] | None = None):
        super().__init__(message)
        self.fields = {key: list(value) for key, value in (fields or {}).items()}


class InsufficientStockError(LedgerError):
    """Levée lorsqu'un produit est absent ou n'a pas assez de stock."""

    def __init__(self, product_id: str, requested: int, available: int | None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        if available is None:
            message = f"Produit {product_id} introuvable."
        else:
            message = f"Stock insuffisant pour {product_id} (stock {available} < vente {requested})."
        super().__init__(message)


class SaleNotFoundError(LedgerError):
    """Levée lorsqu'aucune vente ne porte l'identifiant demandé."""

    def __init__(self, sale_id: str):
        self.sale_id = sale_id
        super().__init__(f"Vente {sale_id} introuvable.")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_sale_id() -> str:
    return f"s{uuid.uuid4().hex}"


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _as_quantity(value: Any) -> int | None:
    """Quantité entière strictement positive, sinon None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        return None
    return value


def _as_price(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    price = float(value)
    if math.isnan(price) or math.isinf(price) or price <= 0:
        return None
    return price


def _coerce_line(raw: SaleLine | Mapping[str, Any], index: int, errors: dict[str, list[str]]) -> SaleLine | None:
    if isinstance(raw, SaleLine):
        raw = {
            "product_id": raw.product_id,
            "product_name": raw.product_name,
            "quantity": raw.quantity,
            "sale_price": raw.sale_price,
        }
    if not isinstance(raw, Mapping):
        errors.setdefault(f"items[{index}]", []).append("Ligne de vente invalide.")
        return None

    product_id = str(_pick(raw, "product_id", "productId") or "").strip()
    product_name = str(_pick(raw, "product_name", "productName") or "").strip()
    quantity = _as_quantity(_pick(raw, "quantity", "qty"))
    sale_price = _as_price(_pick(raw, "sale_price", "salePrice"))

    if not product_id:
        errors.setdefault(f"items[{index}].product_id", []).append("Identifiant produit manquant.")
    if quantity is None:
        errors.setdefault(f"items[{index}].quantity", []).append(
            "La quantité doit être un entier strictement positif."
        )
    if sale_price is None:
        errors.setdefault(f"items[{index}].sale_price", []).append("Le prix de vente doit être positif.")

    if not product_id or quantity is None or sale_price is None:
        return None
    return SaleLine(product_id=product_id, product_name=product_name, quantity=quantity, sale_price=sale_price)


def validate_sale_lines(lines: Iterable[SaleLine | Mapping[str, Any]] | None) -> list[SaleLine]:
    """Normalise les lignes d'une vente ou lève ``SaleValidationError``."""
    raw_lines = list(lines or [])
    if not raw_lines:
        raise SaleValidationError(
            "Une vente doit contenir au moins un article.",
            {"items": ["Une vente doit contenir au moins un article."]},
        )

    errors: dict[str, list[str]] = {}
    sale_lines = [_coerce_line(raw, index, errors) for index, raw in enumerate(raw_lines)]
    if errors:
        raise SaleValidationError("Données de vente invalides.", errors)
    return sale_lines


def compute_total(lines: Iterable[SaleLine]) -> Decimal:
    """Somme exacte des sous-totaux (quantité × prix de vente)."""
    return sum(
        (Decimal(line.quantity) * Decimal(str(line.sale_price)) for line in lines),
        Decimal("0"),
    )


def _resolve_total(lines: list[SaleLine], total: Any, policy: str) -> float:
    computed = compute_total(lines)
    if policy == "recompute":
        return float(computed)

    if isinstance(total, bool):
        total = None
    try:
        declared = Decimal(str(total))
    except (InvalidOperation, TypeError, ValueError):
        declared = None
    if declared is None or not declared.is_finite() or declared < 0:
        raise SaleValidationError(
            "Le total de la vente est invalide.",
            {"total": ["Le total doit être un nombre positif ou nul."]},
        )

    if policy == "verify" and abs(declared - computed) > _TOTAL_TOLERANCE:
        raise SaleValidationError(
            f"Le total {declared} ne correspond pas à la somme des lignes ({computed}).",
            {"total": [f"Total attendu: {computed}."]},
        )
    return float(declared)


def record_sale(
    lines: Iterable[SaleLine | Mapping[str, Any]],
    total: Any,
    *,
    total_policy: str | None = None,
    clock: Callable[[], datetime] | None = None,
    id_factory: Callable[[], str] | None = None,
) -> str:
    """Enregistre une vente en décrémentant le stock, tout ou rien.

    Args:
        lines: articles vendus (``product_id``, ``product_name``, ``quantity``,
            ``sale_price``; les clés camelCase sont acceptées).
        total: total annoncé par l'appelant, traité selon ``total_policy``
            (``verify`` par défaut, ``trust`` ou ``recompute``).

    Returns:
        L'identifiant de la vente créée.
    """
    sale_lines = validate_sale_lines(lines)
    stored_total = _resolve_total(sale_lines, total, total_policy or SETTINGS.sale_total_policy)
    sale = Sale(id=(id_factory or _new_sale_id)(), date=(clock or _utcnow)(), total=stored_total)

    try:
        with SqlUnitOfWork(write=True) as uow:
            # Contrôle du stock réel dans la transaction, ligne par ligne dans l'ordre reçu.
            requested: dict[str, int] = defaultdict(int)
            for index, line in enumerate(sale_lines):
                product = uow.products.get(line.product_id)
                requested[line.product_id] += line.quantity
                if product is None:
                    raise InsufficientStockError(line.product_id, requested[line.product_id], None)
                if product.stock < requested[line.product_id]:
                    raise InsufficientStockError(line.product_id, requested[line.product_id], product.stock)
                if not line.product_name:
                    sale_lines[index] = SaleLine(
                        product_id=line.product_id,
                        product_name=product.name,
                        quantity=line.quantity,
                        sale_price=line.sale_price,
                    )

            # Ordre d'écriture fixe: ventes, lignes, puis produits.
            uow.sales.add(sale)
            for line in sale_lines:
                uow.sales.add_item(sale.id, line)
            for line in sale_lines:
                if not uow.products.decrement_stock(line.product_id, line.quantity):
                    # Produit supprimé ou stock consommé depuis le contrôle.
                    current = uow.products.get(line.product_id)
                    raise InsufficientStockError(
                        line.product_id,
                        line.quantity,
                        current.stock if current is not None else None,
                    )
            uow.commit()
    except InsufficientStockError as exc:
        logger.warning("Vente refusée: %s", exc)
        raise
    except sa_exc.SQLAlchemyError as exc:
        logger.exception("Vente %s annulée suite à une erreur base", sale.id)
        raise LedgerError(f"Erreur lors de l'enregistrement de la vente: {exc}") from exc

    logger.info("Vente %s enregistrée (%d ligne(s), total %.2f)", sale.id, len(sale_lines), sale.total)
    return sale.id


def delete_sale(sale_id: str) -> None:
    """Supprime une vente et remet en stock les quantités qu'elle avait retirées."""
    try:
        with SqlUnitOfWork(write=True) as uow:
            if not uow.sales.exists(sale_id):
                raise SaleNotFoundError(sale_id)

            items = uow.sales.items_for(sale_id)
            # Même ordre de verrouillage que record_sale: ventes puis produits.
            uow.sales.delete(sale_id)
            for item in items:
                if not uow.products.increment_stock(item.product_id, item.quantity):
                    logger.warning(
                        "Vente %s: produit %s absent du catalogue, %d unité(s) non remises en stock",
                        sale_id,
                        item.product_id,
                        item.quantity,
                    )
            uow.commit()
    except sa_exc.SQLAlchemyError as exc:
        logger.exception("Suppression de la vente %s annulée suite à une erreur base", sale_id)
        raise LedgerError(f"Erreur lors de la suppression de la vente: {exc}") from exc

    logger.info("Vente %s supprimée, %d ligne(s) remises en stock", sale_id, len(items))


__all__ = [
    "LedgerError",
    "SaleValidationError",
    "InsufficientStockError",
    "SaleNotFoundError",
    "validate_sale_lines",
    "compute_total",
    "record_sale",
    "delete_sale",
]
