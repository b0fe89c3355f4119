"""
Repository Layer - Clean Architecture pattern for data access.

This module provides:
- A table gateway with the row operations every repository builds on
- Concrete SQL repositories for products and sales
- Unit of Work pattern for transaction management
"""

from .base import SqlUnitOfWork, TableGateway
from .products import SqlProductRepository
from .sales import SqlSaleRepository

__all__ = [
    # Base
    "SqlUnitOfWork",
    "TableGateway",
    # Catalogue
    "SqlProductRepository",
    # Ventes
    "SqlSaleRepository",
]
