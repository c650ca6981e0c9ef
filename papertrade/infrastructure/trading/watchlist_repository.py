"""
Adapter: Watchlist repository.

Implements WatchlistRepository port on SQLAlchemy Core.
The (user_id, product_id) unique constraint keeps one row per pair.
"""

from sqlalchemy import delete, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from papertrade.domain.trading.entities import Product
from papertrade.domain.trading.ports import WatchlistRepository
from papertrade.infrastructure.database.tables import products, watchlist
from papertrade.infrastructure.trading.product_repository import row_to_product


class SqlWatchlistRepository(WatchlistRepository):
    """Reads and writes the watchlist table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def add(self, user_id: int, product_id: int) -> bool:
        if self.contains(user_id, product_id):
            return False
        try:
            with self._conn.begin_nested():
                self._conn.execute(
                    watchlist.insert().values(user_id=user_id, product_id=product_id)
                )
        except IntegrityError:
            # A concurrent request inserted the same pair first
            return False
        return True

    def remove(self, user_id: int, product_id: int) -> bool:
        result = self._conn.execute(
            delete(watchlist)
            .where(watchlist.c.user_id == user_id)
            .where(watchlist.c.product_id == product_id)
        )
        return result.rowcount > 0

    def list_products(self, user_id: int) -> list[Product]:
        query = (
            select(products)
            .select_from(watchlist.join(products, products.c.id == watchlist.c.product_id))
            .where(watchlist.c.user_id == user_id)
            .order_by(watchlist.c.created_at.desc(), watchlist.c.id.desc())
        )
        return [row_to_product(row) for row in self._conn.execute(query)]

    def contains(self, user_id: int, product_id: int) -> bool:
        query = (
            select(watchlist.c.id)
            .where(watchlist.c.user_id == user_id)
            .where(watchlist.c.product_id == product_id)
        )
        return self._conn.execute(query).first() is not None
