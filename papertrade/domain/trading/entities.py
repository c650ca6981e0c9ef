"""
Domain entities for the trading bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from papertrade.domain.trading.errors import InsufficientHoldingsError

MONEY_QUANTUM = Decimal("0.01")
PRICE_QUANTUM = Decimal("0.000001")


def round_money(amount: Decimal) -> Decimal:
    """Round a currency amount half-up to cents."""
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def trade_total(units: Decimal, price: Decimal) -> Decimal:
    """Return the wallet amount moved by trading `units` at `price`."""
    return round_money(units * price)


class TransactionType(Enum):
    """Direction of a ledger entry."""

    BUY = "buy"
    SELL = "sell"


class OrderType(Enum):
    """Direction of a pending order."""

    BUY = "buy"
    SELL = "sell"


class OrderStatus(Enum):
    """Lifecycle state of an order."""

    PENDING = "pending"
    EXECUTED = "executed"
    CANCELLED = "cancelled"


class AlertType(Enum):
    """Condition watched by a price alert."""

    PRICE_ABOVE = "price_above"
    PRICE_BELOW = "price_below"
    VOLUME_ABOVE = "volume_above"


@dataclass(frozen=True)
class Product:
    """A mock financial product available for trading."""

    id: int
    name: str
    category: str
    price: Decimal
    description: Optional[str] = None
    pe_ratio: Optional[Decimal] = None
    market_cap: Optional[int] = None
    volume: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """An immutable ledger entry for one executed buy or sell.

    The optional name/email fields are populated by read queries
    that join the product and user tables.
    """

    id: int
    user_id: int
    product_id: int
    type: TransactionType
    units: Decimal
    price_per_unit: Decimal
    total_amount: Decimal
    created_at: Optional[datetime] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None


@dataclass(frozen=True)
class TransactionStats:
    """Aggregate ledger figures for one user."""

    total_transactions: int
    total_invested: Decimal
    total_units: Decimal


@dataclass(frozen=True)
class PortfolioPosition:
    """Running position of one user in one product.

    Invariant: `average_price` is the quantity-weighted mean of the
    buy fills still held; sells reduce `quantity` and leave the
    average untouched.
    """

    user_id: int
    product_id: int
    quantity: Decimal
    average_price: Decimal

    @classmethod
    def opened(
        cls, user_id: int, product_id: int, units: Decimal, price: Decimal
    ) -> "PortfolioPosition":
        """Return the position created by a first buy."""
        return cls(
            user_id=user_id,
            product_id=product_id,
            quantity=units,
            average_price=price,
        )

    def after_buy(self, units: Decimal, price: Decimal) -> "PortfolioPosition":
        """Return the position after buying `units` at `price`."""
        new_quantity = self.quantity + units
        total_cost = self.quantity * self.average_price + units * price
        new_average = (total_cost / new_quantity).quantize(
            PRICE_QUANTUM, rounding=ROUND_HALF_UP
        )
        return replace(self, quantity=new_quantity, average_price=new_average)

    def after_sell(self, units: Decimal) -> "PortfolioPosition":
        """Return the position after selling `units`.

        Raises:
            InsufficientHoldingsError: If fewer than `units` are held.
        """
        if units > self.quantity:
            raise InsufficientHoldingsError(
                requested=str(units), held=str(self.quantity)
            )
        return replace(self, quantity=self.quantity - units)


@dataclass(frozen=True)
class Holding:
    """A position joined with its product's current price."""

    product_id: int
    product_name: str
    category: str
    current_price: Decimal
    quantity: Decimal
    average_price: Decimal

    @property
    def total_invested(self) -> Decimal:
        return round_money(self.quantity * self.average_price)

    @property
    def current_value(self) -> Decimal:
        return round_money(self.quantity * self.current_price)

    @property
    def unrealized_pnl(self) -> Decimal:
        return self.current_value - self.total_invested

    @property
    def return_percentage(self) -> Decimal:
        if self.total_invested == 0:
            return Decimal("0")
        return round_money(self.unrealized_pnl / self.total_invested * 100)


@dataclass(frozen=True)
class ProductActivity:
    """Trading activity of one product across all users."""

    product_id: int
    name: str
    category: str
    transaction_count: int
    total_volume: Decimal


@dataclass(frozen=True)
class Order:
    """A pending, executed or cancelled order."""

    id: int
    user_id: int
    product_id: int
    order_type: OrderType
    order_status: OrderStatus
    quantity: Decimal
    price: Decimal
    order_price: Optional[Decimal] = None
    execution_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    product_name: Optional[str] = None
    category: Optional[str] = None

    def limit_allows(self, current_price: Decimal) -> bool:
        """Return True if a limit order may fill at `current_price`.

        Market orders (no `order_price`) always fill.
        """
        if self.order_price is None:
            return True
        if self.order_type is OrderType.BUY:
            return current_price <= self.order_price
        return current_price >= self.order_price


@dataclass(frozen=True)
class OrderStats:
    """Order counts and executed amounts for one user."""

    total_orders: int
    executed_orders: int
    pending_orders: int
    cancelled_orders: int
    total_buy_amount: Decimal
    total_sell_amount: Decimal


@dataclass(frozen=True)
class Alert:
    """A user-defined trigger on a product's price or volume."""

    id: int
    user_id: int
    product_id: int
    alert_type: AlertType
    target_value: Decimal
    is_active: bool
    triggered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    product_name: Optional[str] = None

    def is_triggered_by(self, product: Product) -> bool:
        """Return True if the product's current data meets the condition."""
        if self.alert_type is AlertType.PRICE_ABOVE:
            return product.price > self.target_value
        if self.alert_type is AlertType.PRICE_BELOW:
            return product.price < self.target_value
        if product.volume is None:
            return False
        return Decimal(product.volume) > self.target_value
