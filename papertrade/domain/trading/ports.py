"""
Port interfaces (ABCs) for the trading bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.trading.entities import (
    Alert,
    AlertType,
    Holding,
    Order,
    OrderStats,
    OrderType,
    PortfolioPosition,
    Product,
    ProductActivity,
    Transaction,
    TransactionStats,
    TransactionType,
)


class ProductRepository(ABC):
    """Port for the product catalog."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, product_id: int, lock: bool = False) -> Optional[Product]:
        """Return a product by id, or None.

        Args:
            product_id: Primary key of the product.
            lock: Hold a shared row lock so the price cannot change
                until the transaction ends.
        """
        raise NotImplementedError

    @abstractmethod
    def list_by_category(self, category: str) -> list[Product]:
        raise NotImplementedError

    @abstractmethod
    def search(self, term: str) -> list[Product]:
        """Return products whose name or category contains `term`."""
        raise NotImplementedError

    @abstractmethod
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
        """Persist a new product.

        Raises:
            DuplicateProductError: If the name is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def update_price(self, product_id: int, price: Decimal) -> Optional[Product]:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class TransactionRepository(ABC):
    """Port for the append-only transaction ledger."""

    @abstractmethod
    def add(
        self,
        *,
        user_id: int,
        product_id: int,
        type: TransactionType,
        units: Decimal,
        price_per_unit: Decimal,
        total_amount: Decimal,
    ) -> Transaction:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: int) -> list[Transaction]:
        """Return a user's ledger newest first, with product name and category."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self, limit: Optional[int] = None) -> list[Transaction]:
        """Return the whole ledger newest first, with user and product names."""
        raise NotImplementedError

    @abstractmethod
    def stats_for_user(self, user_id: int) -> TransactionStats:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def total_buy_volume(self) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def top_products(self, limit: int = 5) -> list[ProductActivity]:
        """Return the products with the highest traded amount."""
        raise NotImplementedError


class PortfolioRepository(ABC):
    """Port for per-user, per-product positions."""

    @abstractmethod
    def get(
        self, user_id: int, product_id: int, for_update: bool = False
    ) -> Optional[PortfolioPosition]:
        raise NotImplementedError

    @abstractmethod
    def save(self, position: PortfolioPosition) -> None:
        """Insert or update the position row for (user_id, product_id)."""
        raise NotImplementedError

    @abstractmethod
    def holdings_for_user(self, user_id: int) -> list[Holding]:
        """Return positions with quantity > 0 joined with current prices."""
        raise NotImplementedError


class WatchlistRepository(ABC):
    """Port for user watchlists."""

    @abstractmethod
    def add(self, user_id: int, product_id: int) -> bool:
        """Add a pair; return False if it was already present."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, user_id: int, product_id: int) -> bool:
        """Remove a pair; return False if it was not present."""
        raise NotImplementedError

    @abstractmethod
    def list_products(self, user_id: int) -> list[Product]:
        raise NotImplementedError

    @abstractmethod
    def contains(self, user_id: int, product_id: int) -> bool:
        raise NotImplementedError


class OrderRepository(ABC):
    """Port for pending and historical orders."""

    @abstractmethod
    def add(
        self,
        *,
        user_id: int,
        product_id: int,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
        order_price: Optional[Decimal] = None,
    ) -> Order:
        """Persist a new order in the pending state."""
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: int, limit: int = 50, offset: int = 0) -> list[Order]:
        raise NotImplementedError

    @abstractmethod
    def stats_for_user(self, user_id: int) -> OrderStats:
        raise NotImplementedError

    @abstractmethod
    def list_pending(self) -> list[Order]:
        """Return every pending order, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def get_pending_for_update(self, order_id: int) -> Optional[Order]:
        """Return and lock an order if it is still pending."""
        raise NotImplementedError

    @abstractmethod
    def mark_executed(self, order_id: int, price: Decimal, at: datetime) -> None:
        raise NotImplementedError

    @abstractmethod
    def cancel(self, order_id: int, user_id: int) -> Optional[Order]:
        """Cancel a user's pending order; return None if there is none."""
        raise NotImplementedError


class AlertRepository(ABC):
    """Port for price and volume alerts."""

    @abstractmethod
    def add(
        self,
        *,
        user_id: int,
        product_id: int,
        alert_type: AlertType,
        target_value: Decimal,
    ) -> Alert:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: int) -> list[Alert]:
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        alert_id: int,
        user_id: int,
        *,
        alert_type: Optional[AlertType] = None,
        target_value: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[Alert]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, alert_id: int, user_id: int) -> Optional[Alert]:
        raise NotImplementedError

    @abstractmethod
    def list_active(self) -> list[Alert]:
        """Return active alerts, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def mark_triggered(self, alert_id: int, at: datetime) -> None:
        """Deactivate an alert and stamp when it fired."""
        raise NotImplementedError


class ProductCatalogCache(ABC):
    """Port for a short-lived cache of the full product list."""

    @abstractmethod
    def get_products(self) -> Optional[list[Product]]:
        """Return the cached list, or None on a miss."""
        raise NotImplementedError

    @abstractmethod
    def set_products(self, products: list[Product]) -> None:
        raise NotImplementedError

    @abstractmethod
    def invalidate(self) -> None:
        raise NotImplementedError
