"""
Adapter: Product repository.

Implements ProductRepository port on SQLAlchemy Core.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from papertrade.domain.trading.entities import Product
from papertrade.domain.trading.errors import DuplicateProductError
from papertrade.domain.trading.ports import ProductRepository
from papertrade.infrastructure.database.tables import products

logger = logging.getLogger(__name__)


def row_to_product(row: Any) -> Product:
    data = row._mapping
    return Product(
        id=data["id"],
        name=data["name"],
        category=data["category"],
        price=data["price"],
        description=data["description"],
        pe_ratio=data["pe_ratio"],
        market_cap=data["market_cap"],
        volume=data["volume"],
        created_at=data["created_at"],
    )


class SqlProductRepository(ProductRepository):
    """Reads and writes the products table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def list_all(self) -> list[Product]:
        query = select(products).order_by(products.c.created_at.desc(), products.c.id.desc())
        return [row_to_product(row) for row in self._conn.execute(query)]

    def get_by_id(self, product_id: int, lock: bool = False) -> Optional[Product]:
        query = select(products).where(products.c.id == product_id)
        if lock:
            query = query.with_for_update(read=True)
        row = self._conn.execute(query).first()
        return row_to_product(row) if row else None

    def list_by_category(self, category: str) -> list[Product]:
        query = (
            select(products)
            .where(func.lower(products.c.category) == category.lower())
            .order_by(products.c.name)
        )
        return [row_to_product(row) for row in self._conn.execute(query)]

    def search(self, term: str) -> list[Product]:
        needle = term.lower()
        query = (
            select(products)
            .where(
                or_(
                    func.lower(products.c.name).contains(needle, autoescape=True),
                    func.lower(products.c.category).contains(needle, autoescape=True),
                )
            )
            .order_by(products.c.name)
        )
        return [row_to_product(row) for row in self._conn.execute(query)]

    def add(
        self,
        *,
        name: str,
        category: str,
        price: Decimal,
        description: Optional[str] = None,
        pe_ratio: Optional[Decimal] = None,
        market_cap: Optional[int] = None,
        volume: Optional[int] = None,
    ) -> Product:
        try:
            with self._conn.begin_nested():
                result = self._conn.execute(
                    products.insert().values(
                        name=name,
                        category=category,
                        price=price,
                        description=description,
                        pe_ratio=pe_ratio,
                        market_cap=market_cap,
                        volume=volume,
                    )
                )
        except IntegrityError as exc:
            raise DuplicateProductError(name) from exc
        product_id = result.inserted_primary_key[0]
        logger.debug("Inserted product id=%d.", product_id)
        return self.get_by_id(product_id)

    def update_price(self, product_id: int, price: Decimal) -> Optional[Product]:
        result = self._conn.execute(
            update(products).where(products.c.id == product_id).values(price=price)
        )
        if result.rowcount == 0:
            return None
        return self.get_by_id(product_id)

    def count(self) -> int:
        return self._conn.execute(select(func.count()).select_from(products)).scalar_one()
