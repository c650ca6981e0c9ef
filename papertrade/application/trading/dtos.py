"""
Data Transfer Objects for the trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from papertrade.domain.trading.entities import (
    Alert,
    AlertType,
    Holding,
    Order,
    OrderType,
    Product,
    Transaction,
)


@dataclass(frozen=True)
class TradeCommand:
    """Input DTO for buying or selling units of a product.

    Attributes:
        user_id: The trading user.
        product_id: The product being traded.
        units: Number of units, strictly positive.
    """

    user_id: int
    product_id: int
    units: Decimal


@dataclass(frozen=True)
class TradeResult:
    """Output DTO of a committed buy or sell.

    Attributes:
        transaction: The ledger entry that was written.
        new_wallet_balance: Wallet balance after the trade.
    """

    transaction: Transaction
    new_wallet_balance: Decimal


@dataclass(frozen=True)
class ProductDetail:
    """A product plus whether the caller watches it (None when anonymous)."""

    product: Product
    is_watched: Optional[bool] = None


@dataclass(frozen=True)
class CreateProductCommand:
    name: str
    category: str
    price: Decimal
    description: Optional[str] = None
    pe_ratio: Optional[Decimal] = None
    market_cap: Optional[int] = None
    volume: Optional[int] = None


@dataclass(frozen=True)
class PortfolioSummary:
    """Aggregate figures across every holding.

    Attributes:
        total_invested: Cost basis of held units.
        current_value: Held units at current prices.
        returns: current_value - total_invested.
        returns_percentage: returns / total_invested * 100.
    """

    total_invested: Decimal
    current_value: Decimal
    returns: Decimal
    returns_percentage: Decimal


@dataclass(frozen=True)
class PortfolioSummaryResult:
    summary: PortfolioSummary
    wallet_balance: Decimal


@dataclass(frozen=True)
class CategoryAllocation:
    """Share of current portfolio value held in one category."""

    category: str
    current_value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class PortfolioAnalytics:
    summary: PortfolioSummary
    holdings: list[Holding]
    allocation: list[CategoryAllocation]
    wallet_balance: Decimal


@dataclass(frozen=True)
class CreateOrderCommand:
    """Input DTO for placing an order.

    Attributes:
        user_id: Owner of the order.
        product_id: Product to trade.
        order_type: buy or sell.
        quantity: Units, strictly positive.
        order_price: Optional limit price. Market order when None.
    """

    user_id: int
    product_id: int
    order_type: OrderType
    quantity: Decimal
    order_price: Optional[Decimal] = None


@dataclass(frozen=True)
class OrderExecutionOutcome:
    """What happened to one pending order during an execution run.

    Attributes:
        order_id: The order processed.
        status: "executed", "skipped" (limit not met) or "failed".
        message: Human-readable reason for a skip or failure.
        transaction_id: Ledger entry written for an executed order.
    """

    order_id: int
    user_id: int
    product_id: int
    status: str
    message: Optional[str] = None
    transaction_id: Optional[int] = None


@dataclass(frozen=True)
class OrderExecutionReport:
    processed: int
    executed: int
    skipped: int
    failed: int
    outcomes: list[OrderExecutionOutcome] = field(default_factory=list)


@dataclass(frozen=True)
class CreateAlertCommand:
    user_id: int
    product_id: int
    alert_type: AlertType
    target_value: Decimal


@dataclass(frozen=True)
class UpdateAlertCommand:
    """Partial update of an alert; None fields are left unchanged."""

    alert_id: int
    user_id: int
    alert_type: Optional[AlertType] = None
    target_value: Optional[Decimal] = None
    is_active: Optional[bool] = None


@dataclass(frozen=True)
class AlertCheckReport:
    """Result of evaluating every active alert.

    Attributes:
        checked: Number of active alerts evaluated.
        triggered: Alerts that fired during this run.
    """

    checked: int
    triggered: list[Alert] = field(default_factory=list)


@dataclass(frozen=True)
class OrderList:
    orders: list[Order]
    limit: int
    offset: int
