"""
Adapter: Transaction ledger repository.

Implements TransactionRepository port on SQLAlchemy Core.
The ledger is append-only: there is no update or delete.
"""

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import case, desc, func, select
from sqlalchemy.engine import Connection

from papertrade.domain.trading.entities import (
    ProductActivity,
    Transaction,
    TransactionStats,
    TransactionType,
)
from papertrade.domain.trading.ports import TransactionRepository
from papertrade.infrastructure.database.tables import products, transactions, users

ZERO = Decimal("0")


def _row_to_transaction(row: Any) -> Transaction:
    data = row._mapping
    return Transaction(
        id=data["id"],
        user_id=data["user_id"],
        product_id=data["product_id"],
        type=TransactionType(data["type"]),
        units=data["units"],
        price_per_unit=data["price_per_unit"],
        total_amount=data["total_amount"],
        created_at=data["created_at"],
        product_name=data.get("product_name"),
        category=data.get("category"),
        user_name=data.get("user_name"),
        user_email=data.get("user_email"),
    )


def _as_decimal(value: Any, places: str = "0.01") -> Decimal:
    # Aggregates come back as float on SQLite
    if value is None:
        return ZERO.quantize(Decimal(places))
    return Decimal(str(value)).quantize(Decimal(places))


class SqlTransactionRepository(TransactionRepository):
    """Reads and appends to the transactions table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def _select_with_product(self):
        return select(
            transactions,
            products.c.name.label("product_name"),
            products.c.category.label("category"),
        ).select_from(transactions.join(products, products.c.id == transactions.c.product_id))

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
        result = self._conn.execute(
            transactions.insert().values(
                user_id=user_id,
                product_id=product_id,
                type=type.value,
                units=units,
                price_per_unit=price_per_unit,
                total_amount=total_amount,
            )
        )
        transaction_id = result.inserted_primary_key[0]
        row = self._conn.execute(
            self._select_with_product().where(transactions.c.id == transaction_id)
        ).one()
        return _row_to_transaction(row)

    def list_for_user(self, user_id: int) -> list[Transaction]:
        query = (
            self._select_with_product()
            .where(transactions.c.user_id == user_id)
            .order_by(transactions.c.created_at.desc(), transactions.c.id.desc())
        )
        return [_row_to_transaction(row) for row in self._conn.execute(query)]

    def list_all(self, limit: Optional[int] = None) -> list[Transaction]:
        query = (
            select(
                transactions,
                products.c.name.label("product_name"),
                products.c.category.label("category"),
                users.c.name.label("user_name"),
                users.c.email.label("user_email"),
            )
            .select_from(
                transactions.join(products, products.c.id == transactions.c.product_id).join(
                    users, users.c.id == transactions.c.user_id
                )
            )
            .order_by(transactions.c.created_at.desc(), transactions.c.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [_row_to_transaction(row) for row in self._conn.execute(query)]

    def stats_for_user(self, user_id: int) -> TransactionStats:
        is_buy = transactions.c.type == TransactionType.BUY.value
        query = select(
            func.count().label("total_transactions"),
            func.sum(case((is_buy, transactions.c.total_amount), else_=0)).label(
                "total_invested"
            ),
            func.sum(
                case((is_buy, transactions.c.units), else_=-transactions.c.units)
            ).label("total_units"),
        ).where(transactions.c.user_id == user_id)
        row = self._conn.execute(query).one()._mapping
        return TransactionStats(
            total_transactions=int(row["total_transactions"]),
            total_invested=_as_decimal(row["total_invested"]),
            total_units=_as_decimal(row["total_units"], "0.0001"),
        )

    def count(self) -> int:
        return self._conn.execute(
            select(func.count()).select_from(transactions)
        ).scalar_one()

    def total_buy_volume(self) -> Decimal:
        value = self._conn.execute(
            select(func.sum(transactions.c.total_amount)).where(
                transactions.c.type == TransactionType.BUY.value
            )
        ).scalar()
        return _as_decimal(value)

    def top_products(self, limit: int = 5) -> list[ProductActivity]:
        total_volume = func.sum(transactions.c.total_amount).label("total_volume")
        query = (
            select(
                products.c.id,
                products.c.name,
                products.c.category,
                func.count(transactions.c.id).label("transaction_count"),
                total_volume,
            )
            .select_from(products.join(transactions, transactions.c.product_id == products.c.id))
            .group_by(products.c.id, products.c.name, products.c.category)
            .order_by(desc("total_volume"))
            .limit(limit)
        )
        return [
            ProductActivity(
                product_id=row.id,
                name=row.name,
                category=row.category,
                transaction_count=int(row.transaction_count),
                total_volume=_as_decimal(row.total_volume),
            )
            for row in self._conn.execute(query)
        ]
