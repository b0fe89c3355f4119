"""Import de produits depuis un fichier CSV.

Usage: python seed_products.py <fichier.csv>
"""

import logging
import sys

import pandas as pd

from core import product_service
from core.schema import ensure_schema

logger = logging.getLogger(__name__)

_COLUMNS_MAP = {
    "Nom": "name", "nom": "name", "name": "name", "Name": "name",
    "Code-barres": "barcode", "code_barres": "barcode", "barcode": "barcode", "ean": "barcode", "codes": "barcode",
    "Prix d'achat": "purchase_price", "prix_achat": "purchase_price", "purchasePrice": "purchase_price",
    "Prix de vente": "sale_price", "prix_vente": "sale_price", "salePrice": "sale_price", "prix": "sale_price",
    "Stock": "stock", "stock": "stock", "qte_init": "stock", "Quantité disponible": "stock",
}


def norm_cols(df: pd.DataFrame) -> pd.DataFrame:
    return df.rename(columns={c: _COLUMNS_MAP.get(c, c) for c in df.columns})


def read_csv(path: str) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"barcode": str, "Code-barres": str, "code_barres": str, "ean": str})
    if len(df.columns) == 1:
        # CSV à point-virgule (fréquent en locale FR)
        df = pd.read_csv(path, sep=";", dtype=str)
    return df


def import_products(df: pd.DataFrame) -> dict[str, int]:
    """Crée un produit par ligne; les codes-barres déjà connus sont ignorés."""
    df = norm_cols(df)
    if "stock" not in df.columns:
        df["stock"] = 0

    summary = {"created": 0, "skipped": 0, "rejected": 0}
    for index, row in df.iterrows():
        fields = {key: (None if pd.isna(value) else value) for key, value in row.items()}
        try:
            product_service.add_product(fields)
            summary["created"] += 1
        except product_service.DuplicateBarcodeError:
            summary["skipped"] += 1
        except product_service.ProductValidationError as exc:
            logger.warning("Ligne %s rejetée: %s", index + 2, exc.fields)
            summary["rejected"] += 1
    return summary


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        raise SystemExit("Usage: python seed_products.py <fichier.csv>")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    path = argv[0]
    if not path.lower().endswith(".csv"):
        raise SystemExit(f"Format non supporté: {path}")

    df = read_csv(path)
    logger.info("Lecture: %s (%d lignes, colonnes %s)", path, len(df), list(df.columns))
    ensure_schema()
    summary = import_products(df)
    logger.info(
        "Import terminé: créés: %d, déjà présents: %d, rejetés: %d",
        summary["created"],
        summary["skipped"],
        summary["rejected"],
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
