"""
Adapter: Order repository.

Implements OrderRepository port on SQLAlchemy Core.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.engine import Connection

from papertrade.domain.trading.entities import Order, OrderStats, OrderStatus, OrderType
from papertrade.domain.trading.ports import OrderRepository
from papertrade.infrastructure.database.tables import orders, products


def _row_to_order(row: Any) -> Order:
    data = row._mapping
    return Order(
        id=data["id"],
        user_id=data["user_id"],
        product_id=data["product_id"],
        order_type=OrderType(data["order_type"]),
        order_status=OrderStatus(data["order_status"]),
        quantity=data["quantity"],
        price=data["price"],
        order_price=data["order_price"],
        execution_date=data["execution_date"],
        created_at=data["created_at"],
        product_name=data.get("product_name"),
        category=data.get("category"),
    )


def _count_status(status: OrderStatus) -> Any:
    return func.coalesce(
        func.sum(case((orders.c.order_status == status.value, 1), else_=0)), 0
    )


def _executed_amount(order_type: OrderType) -> Any:
    condition = and_(
        orders.c.order_status == OrderStatus.EXECUTED.value,
        orders.c.order_type == order_type.value,
    )
    return func.coalesce(
        func.sum(case((condition, orders.c.quantity * orders.c.price), else_=0)), 0
    )


class SqlOrderRepository(OrderRepository):
    """Reads and writes the orders table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def _select_with_product(self):
        return select(
            orders,
            products.c.name.label("product_name"),
            products.c.category.label("category"),
        ).select_from(orders.join(products, products.c.id == orders.c.product_id))

    def _get(self, order_id: int) -> Optional[Order]:
        row = self._conn.execute(
            self._select_with_product().where(orders.c.id == order_id)
        ).first()
        return _row_to_order(row) if row else None

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
        result = self._conn.execute(
            orders.insert().values(
                user_id=user_id,
                product_id=product_id,
                order_type=order_type.value,
                order_status=OrderStatus.PENDING.value,
                quantity=quantity,
                price=price,
                order_price=order_price,
            )
        )
        return self._get(result.inserted_primary_key[0])

    def list_for_user(self, user_id: int, limit: int = 50, offset: int = 0) -> list[Order]:
        query = (
            self._select_with_product()
            .where(orders.c.user_id == user_id)
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [_row_to_order(row) for row in self._conn.execute(query)]

    def stats_for_user(self, user_id: int) -> OrderStats:
        query = select(
            func.count().label("total_orders"),
            _count_status(OrderStatus.EXECUTED).label("executed_orders"),
            _count_status(OrderStatus.PENDING).label("pending_orders"),
            _count_status(OrderStatus.CANCELLED).label("cancelled_orders"),
            _executed_amount(OrderType.BUY).label("total_buy_amount"),
            _executed_amount(OrderType.SELL).label("total_sell_amount"),
        ).where(orders.c.user_id == user_id)
        row = self._conn.execute(query).one()._mapping
        return OrderStats(
            total_orders=int(row["total_orders"]),
            executed_orders=int(row["executed_orders"]),
            pending_orders=int(row["pending_orders"]),
            cancelled_orders=int(row["cancelled_orders"]),
            total_buy_amount=Decimal(str(row["total_buy_amount"])).quantize(Decimal("0.01")),
            total_sell_amount=Decimal(str(row["total_sell_amount"])).quantize(Decimal("0.01")),
        )

    def list_pending(self) -> list[Order]:
        query = (
            self._select_with_product()
            .where(orders.c.order_status == OrderStatus.PENDING.value)
            .order_by(orders.c.created_at, orders.c.id)
        )
        return [_row_to_order(row) for row in self._conn.execute(query)]

    def get_pending_for_update(self, order_id: int) -> Optional[Order]:
        query = (
            select(orders)
            .where(orders.c.id == order_id)
            .where(orders.c.order_status == OrderStatus.PENDING.value)
            .with_for_update()
        )
        row = self._conn.execute(query).first()
        return _row_to_order(row) if row else None

    def mark_executed(self, order_id: int, price: Decimal, at: datetime) -> None:
        self._conn.execute(
            update(orders)
            .where(orders.c.id == order_id)
            .values(
                order_status=OrderStatus.EXECUTED.value,
                price=price,
                execution_date=at,
            )
        )

    def cancel(self, order_id: int, user_id: int) -> Optional[Order]:
        result = self._conn.execute(
            update(orders)
            .where(orders.c.id == order_id)
            .where(orders.c.user_id == user_id)
            .where(orders.c.order_status == OrderStatus.PENDING.value)
            .values(order_status=OrderStatus.CANCELLED.value)
        )
        if result.rowcount == 0:
            return None
        return self._get(order_id)
