"""
Use case: Execute pending orders.

Input: none (processes every pending order, oldest first)
Output: OrderExecutionReport with one outcome per order
Side effects: For each executed order, the buy or sell flow runs in its
    own database transaction, the order is marked executed at the
    current price and an order notification is written.
Failure cases: Per-order domain errors (funds, holdings, missing
    product) are reported as "failed" and leave the order pending.
    Limit orders whose price is not met, either when checked or at the
    locked fill price, are rolled back and reported as "skipped".
"""

import logging
from decimal import Decimal

from papertrade.application.trading.dtos import (
    OrderExecutionOutcome,
    OrderExecutionReport,
)
from papertrade.application.trading.trade_execution import execute_buy, execute_sell
from papertrade.domain.accounts.entities import NotificationDraft, NotificationType
from papertrade.domain.errors import DomainError
from papertrade.domain.trading.entities import Order, OrderType
from papertrade.domain.trading.errors import LimitPriceNotMetError, ProductNotFoundError
from papertrade.domain.unit_of_work import UnitOfWork, UnitOfWorkFactory
from papertrade.shared.clock import utcnow

logger = logging.getLogger(__name__)

EXECUTED = "executed"
SKIPPED = "skipped"
FAILED = "failed"


class ExecutePendingOrdersUseCase:
    """Runs every pending order through the trade flows."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> OrderExecutionReport:
        with self._uow_factory() as uow:
            pending = uow.orders.list_pending()

        logger.info("Executing %d pending orders.", len(pending))
        outcomes = [self._process(order) for order in pending]

        report = OrderExecutionReport(
            processed=len(outcomes),
            executed=sum(1 for o in outcomes if o.status == EXECUTED),
            skipped=sum(1 for o in outcomes if o.status == SKIPPED),
            failed=sum(1 for o in outcomes if o.status == FAILED),
            outcomes=outcomes,
        )
        logger.info(
            "Order execution finished: executed=%d, skipped=%d, failed=%d",
            report.executed,
            report.skipped,
            report.failed,
        )
        return report

    def _process(self, order: Order) -> OrderExecutionOutcome:
        try:
            with self._uow_factory() as uow:
                return self._execute_one(uow, order)
        except LimitPriceNotMetError as exc:
            return OrderExecutionOutcome(
                order_id=order.id,
                user_id=order.user_id,
                product_id=order.product_id,
                status=SKIPPED,
                message=exc.message,
            )
        except DomainError as exc:
            logger.warning("Order %d failed: %s", order.id, exc.message)
            return OrderExecutionOutcome(
                order_id=order.id,
                user_id=order.user_id,
                product_id=order.product_id,
                status=FAILED,
                message=exc.message,
            )

    def _execute_one(self, uow: UnitOfWork, listed: Order) -> OrderExecutionOutcome:
        order = uow.orders.get_pending_for_update(listed.id)
        if order is None:
            # Cancelled since the pending list was read
            return OrderExecutionOutcome(
                order_id=listed.id,
                user_id=listed.user_id,
                product_id=listed.product_id,
                status=SKIPPED,
                message="Order is no longer pending",
            )

        product = uow.products.get_by_id(order.product_id, lock=True)
        if product is None:
            raise ProductNotFoundError(order.product_id)
        self._check_limit(order, product.price)

        if order.order_type is OrderType.BUY:
            trade = execute_buy(uow, order.user_id, order.product_id, order.quantity)
        else:
            trade = execute_sell(uow, order.user_id, order.product_id, order.quantity)

        # Rolls the fill back if the price moved past the limit
        self._check_limit(order, trade.transaction.price_per_unit)
        uow.orders.mark_executed(order.id, trade.transaction.price_per_unit, utcnow())
        uow.notifications.add(
            NotificationDraft(
                user_id=order.user_id,
                type=NotificationType.ORDER,
                title="Order executed",
                message=(
                    f"Your {order.order_type.value} order for {order.quantity} units of "
                    f"{product.name} was executed at {trade.transaction.price_per_unit}"
                ),
                data={
                    "order_id": order.id,
                    "transaction_id": trade.transaction.id,
                    "total_amount": str(trade.transaction.total_amount),
                },
            )
        )
        return OrderExecutionOutcome(
            order_id=order.id,
            user_id=order.user_id,
            product_id=order.product_id,
            status=EXECUTED,
            transaction_id=trade.transaction.id,
        )

    @staticmethod
    def _check_limit(order: Order, current_price: Decimal) -> None:
        if not order.limit_allows(current_price):
            raise LimitPriceNotMetError(
                order_price=str(order.order_price), current_price=str(current_price)
            )
