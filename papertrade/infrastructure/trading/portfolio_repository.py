"""
Adapter: Portfolio persistence.

Implements PortfolioRepository port on SQLAlchemy Core.
One row per (user, product); writes happen while the owning user's
row is locked, so insert-or-update needs no upsert dialect support.
"""

from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.engine import Connection

from papertrade.domain.trading.entities import Holding, PortfolioPosition
from papertrade.domain.trading.ports import PortfolioRepository
from papertrade.infrastructure.database.tables import portfolio, products


def _row_to_position(row: Any) -> PortfolioPosition:
    data = row._mapping
    return PortfolioPosition(
        user_id=data["user_id"],
        product_id=data["product_id"],
        quantity=data["quantity"],
        average_price=data["average_price"],
    )


class SqlPortfolioRepository(PortfolioRepository):
    """Reads and writes the portfolio table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def get(
        self, user_id: int, product_id: int, for_update: bool = False
    ) -> Optional[PortfolioPosition]:
        query = (
            select(portfolio)
            .where(portfolio.c.user_id == user_id)
            .where(portfolio.c.product_id == product_id)
        )
        if for_update:
            query = query.with_for_update()
        row = self._conn.execute(query).first()
        return _row_to_position(row) if row else None

    def save(self, position: PortfolioPosition) -> None:
        result = self._conn.execute(
            update(portfolio)
            .where(portfolio.c.user_id == position.user_id)
            .where(portfolio.c.product_id == position.product_id)
            .values(quantity=position.quantity, average_price=position.average_price)
        )
        if result.rowcount == 0:
            self._conn.execute(
                portfolio.insert().values(
                    user_id=position.user_id,
                    product_id=position.product_id,
                    quantity=position.quantity,
                    average_price=position.average_price,
                )
            )

    def holdings_for_user(self, user_id: int) -> list[Holding]:
        query = (
            select(
                portfolio.c.product_id,
                portfolio.c.quantity,
                portfolio.c.average_price,
                products.c.name,
                products.c.category,
                products.c.price,
            )
            .select_from(portfolio.join(products, products.c.id == portfolio.c.product_id))
            .where(portfolio.c.user_id == user_id)
            .where(portfolio.c.quantity > 0)
            .order_by(products.c.name)
        )
        return [
            Holding(
                product_id=row.product_id,
                product_name=row.name,
                category=row.category,
                current_price=row.price,
                quantity=row.quantity,
                average_price=row.average_price,
            )
            for row in self._conn.execute(query)
        ]
