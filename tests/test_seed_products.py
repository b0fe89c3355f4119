import pandas as pd

import seed_products
from core import product_service


def test_import_products_creates_skips_and_rejects():
    df = pd.DataFrame(
        [
            {"Nom": "Café", "Code-barres": "111", "Prix d'achat": "2,5", "Prix de vente": 4.0, "Stock": 3},
            {"Nom": "Thé", "Code-barres": "222", "Prix d'achat": 1.0, "Prix de vente": 2.0, "Stock": 5},
            {"Nom": "Thé bis", "Code-barres": "222", "Prix d'achat": 1.0, "Prix de vente": 2.0, "Stock": 1},
        ]
    )

    summary = seed_products.import_products(df)

    assert summary == {"created": 1, "skipped": 1, "rejected": 1}
    assert product_service.get_product_by_barcode("222").stock == 5


def test_main_reads_semicolon_csv(tmp_path):
    path = tmp_path / "produits.csv"
    path.write_text("nom;ean;prix_achat;prix_vente;qte_init\nSucre;333;0.8;1.5;12\n", encoding="utf-8")

    assert seed_products.main([str(path)]) == 0

    product = product_service.get_product_by_barcode("333")
    assert product.name == "Sucre"
    assert product.stock == 12
