"""Services utilitaires pour la gestion des produits et codes-barres."""  # Docstring du module produit

from __future__ import annotations  # Active les annotations différées

import logging
import re  # Expressions régulières pour nettoyer les codes-barres
import uuid
from typing import Any, Mapping  # Types génériques pour annotations

from sqlalchemy import exc as sa_exc  # Exceptions SQLAlchemy

from .models import Product
from .repositories import SqlUnitOfWork

logger = logging.getLogger(__name__)


class ProductServiceError(Exception):
    """Exception de base pour les opérations sur les produits."""


class ProductValidationError(ProductServiceError):
    """Levée lorsque les champs d'un produit sont invalides (erreurs par champ)."""

    def __init__(self, fields: Mapping[str, list[str]]):
        self.fields = {key: list(value) for key, value in fields.items()}
        super().__init__("Champs produit invalides: " + ", ".join(sorted(self.fields)))


class DuplicateBarcodeError(ProductServiceError):
    """Levée lorsqu'un autre produit porte déjà ce code-barres."""

    field = "barcode"

    def __init__(self, barcode: str):
        self.barcode = barcode
        super().__init__("Un produit avec ce code-barres existe déjà.")


class ProductInUseError(ProductServiceError):
    """Levée lorsqu'on tente de supprimer un produit présent dans des ventes."""


class ProductNotFoundError(ProductServiceError):
    """Levée lorsqu'un produit n'est pas trouvé en base."""


_EDITABLE_FIELDS = ("name", "barcode", "purchase_price", "sale_price", "stock")  # Champs modifiables
_FIELD_ALIASES = {
    "purchasePrice": "purchase_price",
    "salePrice": "sale_price",
}  # Noms camelCase acceptés en entrée


def _canonicalize_barcode(code: Any) -> str | None:
    if code is None:  # Si aucun code fourni
        return None
    cleaned = re.sub(r"\s+", "", str(code))  # Retire tous les espaces
    return cleaned or None  # None si vide


def _coerce_text(value: Any) -> str | None:
    cleaned = str(value or "").strip()  # Convertit en chaîne et enlève les espaces
    return cleaned or None


def _coerce_price(value: Any) -> float | None:
    if value in (None, "") or isinstance(value, bool):  # Valeurs vides
        return None
    try:
        price = float(value)  # Convertit en float
    except (TypeError, ValueError):
        return None
    return price if price > 0 and price != float("inf") else None


def _coerce_stock(value: Any) -> int | None:
    if value in (None, "") or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer() or number < 0:  # Entier positif ou nul uniquement
        return None
    return int(number)


def _normalize_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in fields.items():
        column = _FIELD_ALIASES.get(key, key)  # Traduit camelCase -> snake_case
        if column in _EDITABLE_FIELDS:
            normalized[column] = value
    return normalized


def validate_product_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Valide un produit complet et renvoie les valeurs nettoyées."""

    raw = _normalize_fields(fields)
    errors: dict[str, list[str]] = {}
    cleaned = {
        "name": _coerce_text(raw.get("name")),
        "barcode": _canonicalize_barcode(raw.get("barcode")),
        "purchase_price": _coerce_price(raw.get("purchase_price")),
        "sale_price": _coerce_price(raw.get("sale_price")),
        "stock": _coerce_stock(raw.get("stock")),
    }

    if cleaned["name"] is None:
        errors["name"] = ["Le nom du produit est obligatoire."]
    if cleaned["barcode"] is None:
        errors["barcode"] = ["Le code-barres est obligatoire."]
    if cleaned["purchase_price"] is None:
        errors["purchase_price"] = ["Le prix d'achat doit être positif."]
    if cleaned["sale_price"] is None:
        errors["sale_price"] = ["Le prix de vente doit être positif."]
    if cleaned["stock"] is None:
        errors["stock"] = ["Le stock doit être un entier positif ou nul."]

    if errors:
        raise ProductValidationError(errors)
    return cleaned


def _new_product_id() -> str:
    return f"p{uuid.uuid4().hex}"


def _is_unique_violation(exc: sa_exc.IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


def list_products(search: str | None = None) -> list[Product]:
    """Liste les produits triés par nom, filtrés sur le nom ou le code-barres."""

    with SqlUnitOfWork() as uow:
        items = list(uow.products.list_all())

    needle = (search or "").strip().lower()
    if not needle:
        return items
    return [
        product
        for product in items
        if needle in product.name.lower() or needle in product.barcode.lower()
    ]


def get_product(product_id: str) -> Product:
    with SqlUnitOfWork() as uow:
        product = uow.products.get(product_id)
    if product is None:
        raise ProductNotFoundError(f"Produit {product_id} introuvable.")
    return product


def get_product_by_barcode(barcode: str) -> Product:
    canonical = _canonicalize_barcode(barcode)
    if not canonical:
        raise ProductNotFoundError("Code-barres invalide.")
    with SqlUnitOfWork() as uow:
        product = uow.products.find_by_barcode(canonical)
    if product is None:
        raise ProductNotFoundError("Aucun produit pour ce code-barres.")
    return product


def add_product(fields: Mapping[str, Any], *, product_id: str | None = None) -> Product:
    """Crée un produit après contrôle des champs et de l'unicité du code-barres."""

    cleaned = validate_product_fields(fields)
    product = Product(id=product_id or _new_product_id(), **cleaned)
    try:
        with SqlUnitOfWork(write=True) as uow:
            if uow.products.find_by_barcode(product.barcode) is not None:
                raise DuplicateBarcodeError(product.barcode)
            uow.products.add(product)
            uow.commit()
    except sa_exc.IntegrityError as exc:
        if _is_unique_violation(exc):
            raise DuplicateBarcodeError(product.barcode) from exc
        raise

    logger.info("Produit %s créé (%s, code %s)", product.id, product.name, product.barcode)
    return product


def update_product(product_id: str, fields: Mapping[str, Any]) -> Product:
    """Modifie un produit; les champs absents gardent leur valeur actuelle.

    Les lignes de vente existantes conservent leur nom et leur prix figés.
    """

    try:
        with SqlUnitOfWork(write=True) as uow:
            current = uow.products.get(product_id)
            if current is None:
                raise ProductNotFoundError(f"Produit {product_id} introuvable.")

            merged = {column: getattr(current, column) for column in _EDITABLE_FIELDS}
            merged.update(_normalize_fields(fields))
            cleaned = validate_product_fields(merged)

            owner = uow.products.find_by_barcode(cleaned["barcode"])
            if owner is not None and owner.id != product_id:
                raise DuplicateBarcodeError(cleaned["barcode"])

            uow.products.update(product_id, cleaned)
            uow.commit()
    except sa_exc.IntegrityError as exc:
        if _is_unique_violation(exc):
            raise DuplicateBarcodeError(str(fields.get("barcode", ""))) from exc
        raise

    logger.info("Produit %s mis à jour", product_id)
    return Product(id=product_id, **cleaned)


def delete_product(product_id: str) -> None:
    """Supprime un produit, sauf s'il apparaît dans une vente enregistrée."""

    with SqlUnitOfWork(write=True) as uow:
        if uow.products.get(product_id) is None:
            raise ProductNotFoundError(f"Produit {product_id} introuvable.")
        if uow.sales.references_product(product_id):
            raise ProductInUseError(
                f"Produit {product_id} utilisé dans des ventes: suppression impossible."
            )
        uow.products.delete(product_id)
        uow.commit()

    logger.info("Produit %s supprimé", product_id)


__all__ = [
    "ProductServiceError",
    "ProductValidationError",
    "DuplicateBarcodeError",
    "ProductInUseError",
    "ProductNotFoundError",
    "validate_product_fields",
    "list_products",
    "get_product",
    "get_product_by_barcode",
    "add_product",
    "update_product",
    "delete_product",
]
