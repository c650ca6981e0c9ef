"""
SQLAlchemy Core table definitions.

One MetaData holds the whole schema. Repositories build their queries
from these tables so the same SQL runs on PostgreSQL and SQLite.
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from papertrade.shared.clock import utcnow

metadata = MetaData()


def _created_at() -> Column:
    return Column("created_at", DateTime, nullable=False, default=utcnow)


def _updated_at() -> Column:
    return Column("updated_at", DateTime, nullable=False, default=utcnow, onupdate=utcnow)


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("phone", String(15)),
    Column("role", String(10), nullable=False, default="user"),
    Column("wallet_balance", Numeric(15, 2), nullable=False),
    _created_at(),
    _updated_at(),
    Column("last_login", DateTime),
    CheckConstraint("wallet_balance >= 0", name="ck_users_wallet_non_negative"),
    CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("category", String(100), nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("description", Text),
    Column("pe_ratio", Numeric(10, 2)),
    Column("market_cap", BigInteger),
    Column("volume", BigInteger),
    _created_at(),
    _updated_at(),
    CheckConstraint("price > 0", name="ck_products_price_positive"),
    Index("ix_products_category", "category"),
)

transactions = Table(
    "transactions",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    ),
    Column("type", String(4), nullable=False),
    Column("units", Numeric(15, 4), nullable=False),
    Column("price_per_unit", Numeric(12, 2), nullable=False),
    Column("total_amount", Numeric(15, 2), nullable=False),
    _created_at(),
    CheckConstraint("units > 0", name="ck_transactions_units_positive"),
    CheckConstraint("type IN ('buy', 'sell')", name="ck_transactions_type"),
    Index("ix_transactions_user_id", "user_id"),
    Index("ix_transactions_created_at", "created_at"),
)

portfolio = Table(
    "portfolio",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    ),
    Column("quantity", Numeric(15, 4), nullable=False),
    Column("average_price", Numeric(18, 6), nullable=False),
    _created_at(),
    _updated_at(),
    UniqueConstraint("user_id", "product_id", name="uq_portfolio_user_product"),
    CheckConstraint("quantity >= 0", name="ck_portfolio_quantity_non_negative"),
)

watchlist = Table(
    "watchlist",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    ),
    _created_at(),
    UniqueConstraint("user_id", "product_id", name="uq_watchlist_user_product"),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    ),
    Column("order_type", String(4), nullable=False),
    Column("order_status", String(10), nullable=False, default="pending"),
    Column("quantity", Numeric(15, 4), nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("order_price", Numeric(12, 2)),
    Column("execution_date", DateTime),
    _created_at(),
    _updated_at(),
    CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
    Index("ix_orders_user_id", "user_id"),
    Index("ix_orders_status", "order_status"),
)

alerts = Table(
    "alerts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    ),
    Column("alert_type", String(20), nullable=False),
    Column("target_value", Numeric(15, 2), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("triggered_at", DateTime),
    _created_at(),
    _updated_at(),
    Index("ix_alerts_user_id", "user_id"),
)

notifications = Table(
    "notifications",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("type", String(20), nullable=False),
    Column("title", String(255), nullable=False),
    Column("message", Text, nullable=False),
    Column("data", JSON),
    Column("is_read", Boolean, nullable=False, default=False),
    Column("read_at", DateTime),
    _created_at(),
    Index("ix_notifications_user_id", "user_id"),
)

kyc = Table(
    "kyc",
    metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("pan_number", String(10), nullable=False, unique=True),
    Column("address", String(200), nullable=False),
    Column("phone", String(15), nullable=False),
    Column("status", String(10), nullable=False, default="pending"),
    _created_at(),
    _updated_at(),
)

audit_logs = Table(
    "audit_logs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="SET NULL")),
    Column("action", String(20), nullable=False),
    Column("resource", String(50), nullable=False),
    Column("resource_id", String(100)),
    Column("details", JSON),
    Column("ip_address", String(45)),
    Column("user_agent", Text),
    _created_at(),
    Index("ix_audit_logs_user_id", "user_id"),
    Index("ix_audit_logs_resource", "resource", "resource_id"),
    Index("ix_audit_logs_created_at", "created_at"),
)
