"""
Pydantic schemas for trading API request/response validation.

These schemas enforce input validation and define the API contract.
Response schemas read domain entities and DTOs by attribute.
Money and quantities are Decimals and serialize as strings.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from papertrade.domain.trading.entities import (
    AlertType,
    OrderStatus,
    OrderType,
    TransactionType,
)

PRICE_DESCRIPTION = "Price per unit in virtual currency"


class ReadModel(BaseModel):
    """Base for response schemas built from domain objects."""

    model_config = ConfigDict(from_attributes=True)


# ── Products ──────────────────────────────────────────────────────


class ProductSchema(ReadModel):
    """A product in the catalog."""

    id: int
    name: str
    category: str
    price: Decimal
    description: Optional[str] = None
    pe_ratio: Optional[Decimal] = None
    market_cap: Optional[int] = None
    volume: Optional[int] = None
    created_at: Optional[datetime] = None


class ProductDetailSchema(ProductSchema):
    """A product plus the caller's watch state (null when anonymous)."""

    is_watched: Optional[bool] = None


class ProductsData(ReadModel):
    products: list[ProductSchema]


class ProductData(ReadModel):
    product: ProductDetailSchema


class CreateProductRequest(BaseModel):
    """Request schema for adding a product.

    Attributes:
        name: Unique product name.
        category: Free-form category label (e.g. "Stocks", "Mutual Funds").
        price: Current price, strictly positive.
    """

    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(
        ..., gt=0, max_digits=12, decimal_places=2, description=PRICE_DESCRIPTION
    )
    description: Optional[str] = Field(default=None, max_length=2000)
    pe_ratio: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    market_cap: Optional[int] = Field(default=None, ge=0)
    volume: Optional[int] = Field(default=None, ge=0)


class UpdatePriceRequest(BaseModel):
    price: Decimal = Field(
        ..., gt=0, max_digits=12, decimal_places=2, description=PRICE_DESCRIPTION
    )


# ── Transactions ──────────────────────────────────────────────────


class TradeRequest(BaseModel):
    """Request schema for buying or selling.

    Attributes:
        product_id: Product to trade (JSON key `productId`).
        units: Units to trade, strictly positive, up to 4 decimals.
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId", gt=0)
    units: Decimal = Field(..., gt=0, max_digits=15, decimal_places=4)


class TransactionSchema(ReadModel):
    id: int
    user_id: int
    product_id: int
    product_name: Optional[str] = None
    category: Optional[str] = None
    type: TransactionType
    units: Decimal
    price_per_unit: Decimal
    total_amount: Decimal
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class TradeData(ReadModel):
    transaction: TransactionSchema
    new_wallet_balance: Decimal


class TransactionsData(ReadModel):
    transactions: list[TransactionSchema]


class TransactionStatsSchema(ReadModel):
    total_transactions: int
    total_invested: Decimal
    total_units: Decimal


class TransactionStatsData(ReadModel):
    stats: TransactionStatsSchema


# ── Portfolio & watchlist ─────────────────────────────────────────


class HoldingSchema(ReadModel):
    """A held position valued at the current price."""

    product_id: int
    product_name: str
    category: str
    current_price: Decimal
    quantity: Decimal
    average_price: Decimal
    total_invested: Decimal
    current_value: Decimal
    unrealized_pnl: Decimal
    return_percentage: Decimal


class HoldingsData(ReadModel):
    holdings: list[HoldingSchema]


class PortfolioSummarySchema(ReadModel):
    total_invested: Decimal
    current_value: Decimal
    returns: Decimal
    returns_percentage: Decimal


class PortfolioSummaryData(ReadModel):
    summary: PortfolioSummarySchema
    wallet_balance: Decimal


class WatchlistData(ReadModel):
    watchlist: list[ProductSchema]


# ── Orders ────────────────────────────────────────────────────────


class CreateOrderRequest(BaseModel):
    """Request schema for placing an order.

    Attributes:
        product_id: Product to trade.
        order_type: buy or sell.
        quantity: Units, strictly positive.
        order_price: Optional limit price. Omit for a market order.
    """

    product_id: int = Field(..., gt=0)
    order_type: OrderType
    quantity: Decimal = Field(..., gt=0, max_digits=15, decimal_places=4)
    order_price: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=12, decimal_places=2
    )


class OrderSchema(ReadModel):
    id: int
    user_id: int
    product_id: int
    product_name: Optional[str] = None
    category: Optional[str] = None
    order_type: OrderType
    order_status: OrderStatus
    quantity: Decimal
    price: Decimal
    order_price: Optional[Decimal] = None
    execution_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class OrderData(ReadModel):
    order: OrderSchema


class OrdersData(ReadModel):
    orders: list[OrderSchema]
    limit: int
    offset: int


class PendingOrdersData(ReadModel):
    orders: list[OrderSchema]


class OrderStatsSchema(ReadModel):
    total_orders: int
    executed_orders: int
    pending_orders: int
    cancelled_orders: int
    total_buy_amount: Decimal
    total_sell_amount: Decimal


class OrderStatsData(ReadModel):
    stats: OrderStatsSchema


class OrderExecutionOutcomeSchema(ReadModel):
    order_id: int
    user_id: int
    product_id: int
    status: str
    message: Optional[str] = None
    transaction_id: Optional[int] = None


class OrderExecutionReportSchema(ReadModel):
    processed: int
    executed: int
    skipped: int
    failed: int
    outcomes: list[OrderExecutionOutcomeSchema]


# ── Alerts ────────────────────────────────────────────────────────


class CreateAlertRequest(BaseModel):
    product_id: int = Field(..., gt=0)
    alert_type: AlertType
    target_value: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)


class UpdateAlertRequest(BaseModel):
    """Partial alert update; omitted fields are left unchanged."""

    alert_type: Optional[AlertType] = None
    target_value: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=15, decimal_places=2
    )
    is_active: Optional[bool] = None


class AlertSchema(ReadModel):
    id: int
    user_id: int
    product_id: int
    product_name: Optional[str] = None
    alert_type: AlertType
    target_value: Decimal
    is_active: bool
    triggered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AlertData(ReadModel):
    alert: AlertSchema


class AlertsData(ReadModel):
    alerts: list[AlertSchema]


class AlertCheckData(ReadModel):
    checked: int
    triggered: list[AlertSchema]


# ── Analytics ─────────────────────────────────────────────────────


class CategoryAllocationSchema(ReadModel):
    category: str
    current_value: Decimal
    percentage: Decimal


class PortfolioAnalyticsData(ReadModel):
    summary: PortfolioSummarySchema
    holdings: list[HoldingSchema]
    allocation: list[CategoryAllocationSchema]
    wallet_balance: Decimal


class ProductActivitySchema(ReadModel):
    product_id: int
    name: str
    category: str
    transaction_count: int
    total_volume: Decimal
