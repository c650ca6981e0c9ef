"""
Use cases: Place, list and cancel orders.

Orders are stored as pending; they only move wallet funds and
holdings when an administrator runs order execution.
"""

import logging

from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.application.trading.dtos import CreateOrderCommand, OrderList
from papertrade.domain.accounts.entities import AuditAction
from papertrade.domain.accounts.errors import UserNotFoundError
from papertrade.domain.errors import ResourceNotFoundError, ValidationError
from papertrade.domain.trading.entities import Order, OrderStats, OrderType, trade_total
from papertrade.domain.trading.errors import (
    InsufficientFundsError,
    ProductNotFoundError,
    TradeTooSmallError,
)
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class CreateOrderUseCase:
    """Place a pending buy or sell order.

    A buy order is rejected up front when its notional value
    (quantity times limit price, or current price for a market order)
    exceeds the wallet. Funds are checked again at execution time.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self, command: CreateOrderCommand, context: RequestContext = ANONYMOUS
    ) -> Order:
        """Store the order.

        Raises:
            ValidationError: If quantity or limit price is not positive.
            ProductNotFoundError: If the product does not exist.
            TradeTooSmallError: If the order is worth less than one cent.
            InsufficientFundsError: If a buy exceeds the wallet balance.
        """
        if command.quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")
        if command.order_price is not None and command.order_price <= 0:
            raise ValidationError("Order price must be greater than 0")

        with self._uow_factory() as uow:
            product = uow.products.get_by_id(command.product_id)
            if product is None:
                raise ProductNotFoundError(command.product_id)
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)

            price = command.order_price if command.order_price is not None else product.price
            required = trade_total(command.quantity, price)
            if required <= 0:
                raise TradeTooSmallError(units=str(command.quantity), price=str(price))
            if command.order_type is OrderType.BUY and required > user.wallet_balance:
                raise InsufficientFundsError(
                    required=str(required), available=str(user.wallet_balance)
                )

            order = uow.orders.add(
                user_id=command.user_id,
                product_id=command.product_id,
                order_type=command.order_type,
                quantity=command.quantity,
                price=price,
                order_price=command.order_price,
            )
            record_audit(
                uow,
                context,
                action=AuditAction.CREATE,
                resource="order",
                user_id=command.user_id,
                resource_id=order.id,
                details={
                    "order_type": order.order_type.value,
                    "product_id": order.product_id,
                    "quantity": str(order.quantity),
                },
            )

        logger.info(
            "Order placed: id=%d, user_id=%d, type=%s",
            order.id,
            order.user_id,
            order.order_type.value,
        )
        return order


class ListUserOrdersUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, limit: int = 50, offset: int = 0) -> OrderList:
        with self._uow_factory() as uow:
            orders = uow.orders.list_for_user(user_id, limit=limit, offset=offset)
        return OrderList(orders=orders, limit=limit, offset=offset)


class GetOrderStatsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> OrderStats:
        with self._uow_factory() as uow:
            return uow.orders.stats_for_user(user_id)


class CancelOrderUseCase:
    """Cancel one of the caller's own pending orders."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self, order_id: int, user_id: int, context: RequestContext = ANONYMOUS
    ) -> Order:
        """Cancel the order.

        Raises:
            ResourceNotFoundError: If no pending order with this id belongs to the user.
        """
        with self._uow_factory() as uow:
            order = uow.orders.cancel(order_id, user_id)
            if order is None:
                raise ResourceNotFoundError(
                    "Order", order_id, "Order not found or cannot be cancelled"
                )
            record_audit(
                uow,
                context,
                action=AuditAction.UPDATE,
                resource="order",
                user_id=user_id,
                resource_id=order_id,
                details={"order_status": order.order_status.value},
            )
        logger.info("Order cancelled: id=%d, user_id=%d", order_id, user_id)
        return order


class ListPendingOrdersUseCase:
    """Admin: every pending order, oldest first."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> list[Order]:
        with self._uow_factory() as uow:
            return uow.orders.list_pending()
