"""Jeu de données de démonstration (catalogue + ventes historiques)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .models import Product, Sale, SaleLine
from .repositories import SqlUnitOfWork

logger = logging.getLogger(__name__)

DEMO_PRODUCTS: tuple[Product, ...] = (
    Product("p1", "Premium Coffee Beans", "8992761132015", 15.50, 25.00, 100),
    Product("p2", "Organic Green Tea", "8992761132022", 8.00, 14.50, 150),
    Product("p3", "Artisan Sourdough Bread", "8992761132039", 3.50, 7.00, 50),
    Product("p4", "Gourmet Chocolate Bar", "8992761132046", 2.75, 5.50, 200),
    Product("p5", "Fresh Orange Juice", "8992761132053", 4.00, 7.50, 80),
    Product("p6", "Whole Milk (1L)", "8992761132060", 1.50, 3.00, 120),
    Product("p7", "Free-Range Eggs (Dozen)", "8992761132077", 3.00, 5.50, 60),
)


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# Historique importé tel quel: le stock des produits ci-dessus tient déjà compte de ces ventes.
DEMO_SALES: tuple[tuple[Sale, tuple[SaleLine, ...]], ...] = (
    (
        Sale("s1", _utc(2023, 10, 1, 10, 0), 57.00),
        (
            SaleLine("p1", "Premium Coffee Beans", 2, 25.00),
            SaleLine("p3", "Artisan Sourdough Bread", 1, 7.00),
        ),
    ),
    (
        Sale("s2", _utc(2023, 10, 2, 14, 30), 31.00),
        (
            SaleLine("p2", "Organic Green Tea", 1, 14.50),
            SaleLine("p4", "Gourmet Chocolate Bar", 3, 5.50),
        ),
    ),
    (
        Sale("s3", _utc(2023, 10, 2, 18, 45), 15.00),
        (SaleLine("p5", "Fresh Orange Juice", 2, 7.50),),
    ),
    (
        Sale("s4", _utc(2023, 10, 3, 9, 15), 18.50),
        (
            SaleLine("p6", "Whole Milk (1L)", 2, 3.00),
            SaleLine("p7", "Free-Range Eggs (Dozen)", 1, 5.50),
            SaleLine("p3", "Artisan Sourdough Bread", 1, 7.00),
        ),
    ),
    (
        Sale("s5", _utc(2023, 10, 4, 11, 0), 36.00),
        (
            SaleLine("p1", "Premium Coffee Beans", 1, 25.00),
            SaleLine("p4", "Gourmet Chocolate Bar", 2, 5.50),
        ),
    ),
)


def seed_demo_data() -> bool:
    """Insère le jeu de démonstration si le catalogue est vide.

    Returns:
        True si des données ont été insérées.
    """

    with SqlUnitOfWork(write=True) as uow:
        if uow.products.count():
            return False
        for product in DEMO_PRODUCTS:
            uow.products.add(product)
        for sale, lines in DEMO_SALES:
            uow.sales.add(sale)
            for line in lines:
                uow.sales.add_item(sale.id, line)
        uow.commit()

    logger.info("Données de démonstration insérées (%d produits, %d ventes)", len(DEMO_PRODUCTS), len(DEMO_SALES))
    return True


__all__ = ["DEMO_PRODUCTS", "DEMO_SALES", "seed_demo_data"]
