"""
Tests for orders, order execution and alert evaluation.

Orders and alerts are stored by one use case and acted on later by an
admin-triggered batch, so these tests cover both halves together.
"""

from dataclasses import replace
from decimal import Decimal
from functools import partial

import pytest

from papertrade.application.trading.alerts import (
    CreateAlertUseCase,
    DeleteAlertUseCase,
    UpdateAlertUseCase,
)
from papertrade.application.trading.check_alerts import CheckAlertsUseCase
from papertrade.application.trading.dtos import (
    CreateAlertCommand,
    CreateOrderCommand,
    UpdateAlertCommand,
)
from papertrade.application.trading.execute_orders import ExecutePendingOrdersUseCase
from papertrade.application.trading.orders import (
    CancelOrderUseCase,
    CreateOrderUseCase,
    GetOrderStatsUseCase,
)
from papertrade.domain.accounts.entities import NotificationType
from papertrade.domain.errors import ResourceNotFoundError
from papertrade.domain.trading.entities import AlertType, OrderStatus, OrderType
from papertrade.domain.trading.errors import (
    InsufficientFundsError,
    ProductNotFoundError,
    TradeTooSmallError,
)
from papertrade.infrastructure.database.unit_of_work import SqlUnitOfWork


class StalePriceUnitOfWork(SqlUnitOfWork):
    """Unit of work whose first product read returns an outdated price.

    Stands in for an admin price update committing between the limit
    check and the fill.
    """

    def __init__(self, engine, stale_price: Decimal, lock_calls: list) -> None:
        super().__init__(engine)
        self._stale_price = stale_price
        self._lock_calls = lock_calls

    def __enter__(self) -> "StalePriceUnitOfWork":
        super().__enter__()
        read = self.products.get_by_id
        reads = []

        def first_read_is_stale(product_id, lock=False):
            self._lock_calls.append(lock)
            product = read(product_id, lock=lock)
            reads.append(product_id)
            if len(reads) == 1 and product is not None:
                return replace(product, price=self._stale_price)
            return product

        self.products.get_by_id = first_read_is_stale
        return self


def _place(uow_factory, user_id, product_id, order_type, quantity, order_price=None):
    return CreateOrderUseCase(uow_factory).execute(
        CreateOrderCommand(
            user_id=user_id,
            product_id=product_id,
            order_type=order_type,
            quantity=Decimal(quantity),
            order_price=Decimal(order_price) if order_price else None,
        )
    )


def _set_price(uow_factory, product_id: int, price: str) -> None:
    with uow_factory() as uow:
        uow.products.update_price(product_id, Decimal(price))


class TestCreateOrderUseCase:
    """Tests for placing orders."""

    def test_market_order_is_stored_pending_at_current_price(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("80.00"))

        order = _place(uow_factory, user.id, product.id, OrderType.BUY, "2")

        assert order.order_status is OrderStatus.PENDING
        assert order.price == Decimal("80.00")
        assert order.order_price is None

    def test_limit_order_is_stored_at_limit_price(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("80.00"))

        order = _place(uow_factory, user.id, product.id, OrderType.BUY, "2", "75.00")

        assert order.price == Decimal("75.00")
        assert order.order_price == Decimal("75.00")

    def test_buy_order_beyond_wallet_is_rejected(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user(balance=Decimal("100.00"))
        product = make_product(price=Decimal("80.00"))

        with pytest.raises(InsufficientFundsError):
            _place(uow_factory, user.id, product.id, OrderType.BUY, "2")

    def test_order_worth_less_than_a_cent_is_rejected(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("1.00"))

        with pytest.raises(TradeTooSmallError):
            _place(uow_factory, user.id, product.id, OrderType.BUY, "0.0049")
        with pytest.raises(TradeTooSmallError):
            _place(uow_factory, user.id, product.id, OrderType.SELL, "0.0049")

        with uow_factory() as uow:
            assert uow.orders.list_pending() == []

    def test_unknown_product_is_rejected(self, uow_factory, make_user) -> None:
        user = make_user()
        with pytest.raises(ProductNotFoundError):
            _place(uow_factory, user.id, 999, OrderType.BUY, "1")

    def test_cancel_only_own_pending_order(self, uow_factory, make_user, make_product) -> None:
        owner = make_user()
        other = make_user()
        product = make_product()
        order = _place(uow_factory, owner.id, product.id, OrderType.BUY, "1")

        with pytest.raises(ResourceNotFoundError):
            CancelOrderUseCase(uow_factory).execute(order.id, other.id)

        cancelled = CancelOrderUseCase(uow_factory).execute(order.id, owner.id)
        assert cancelled.order_status is OrderStatus.CANCELLED

        with pytest.raises(ResourceNotFoundError):
            CancelOrderUseCase(uow_factory).execute(order.id, owner.id)


class TestExecutePendingOrdersUseCase:
    """Tests for the order execution batch."""

    def test_market_buy_executes_and_notifies(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("100.00"))
        order = _place(uow_factory, user.id, product.id, OrderType.BUY, "3")

        report = ExecutePendingOrdersUseCase(uow_factory).execute()

        assert report.processed == 1
        assert report.executed == 1
        assert report.outcomes[0].order_id == order.id
        assert report.outcomes[0].transaction_id is not None
        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("700.00")
            assert uow.portfolio.get(user.id, product.id).quantity == Decimal("3")
            assert uow.orders.list_pending() == []
            notifications = uow.notifications.list_for_user(user.id)
        assert NotificationType.ORDER in {n.type for n in notifications}

    def test_unmet_limit_is_skipped_and_stays_pending(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("100.00"))
        _place(uow_factory, user.id, product.id, OrderType.BUY, "1", "90.00")

        report = ExecutePendingOrdersUseCase(uow_factory).execute()

        assert report.skipped == 1
        assert report.executed == 0
        with uow_factory() as uow:
            assert len(uow.orders.list_pending()) == 1

        _set_price(uow_factory, product.id, "89.00")
        report = ExecutePendingOrdersUseCase(uow_factory).execute()

        assert report.executed == 1
        with uow_factory() as uow:
            assert uow.transactions.list_for_user(user.id)[0].price_per_unit == Decimal("89.00")

    def test_price_moving_past_limit_before_fill_rolls_back(
        self, engine, uow_factory, make_user, make_product
    ) -> None:
        """The limit passes on a stale 90 but the fill would be at 120, so nothing fills."""
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("90.00"))
        _place(uow_factory, user.id, product.id, OrderType.BUY, "1", "100.00")
        _set_price(uow_factory, product.id, "120.00")
        lock_calls = []
        stale_factory = partial(
            StalePriceUnitOfWork, engine, stale_price=Decimal("90.00"), lock_calls=lock_calls
        )

        report = ExecutePendingOrdersUseCase(stale_factory).execute()

        assert (report.executed, report.skipped) == (0, 1)
        assert report.outcomes[0].message == (
            "Limit price 100.00 not met at current price 120.00"
        )
        assert lock_calls and all(lock_calls)
        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("1000.00")
            assert uow.transactions.list_for_user(user.id) == []
            assert len(uow.orders.list_pending()) == 1

    def test_sell_limit_fills_at_or_above_limit(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("100.00"))
        _place(uow_factory, user.id, product.id, OrderType.BUY, "2")
        ExecutePendingOrdersUseCase(uow_factory).execute()
        _place(uow_factory, user.id, product.id, OrderType.SELL, "2", "120.00")

        _set_price(uow_factory, product.id, "120.00")
        report = ExecutePendingOrdersUseCase(uow_factory).execute()

        assert report.executed == 1
        with uow_factory() as uow:
            assert uow.portfolio.get(user.id, product.id).quantity == Decimal("0")

    def test_failed_order_stays_pending_and_others_still_run(
        self, uow_factory, make_user, make_product
    ) -> None:
        """A sell without holdings fails on its own; the next order still executes."""
        seller = make_user()
        buyer = make_user()
        product = make_product(price=Decimal("10.00"))
        _place(uow_factory, seller.id, product.id, OrderType.SELL, "5")
        _place(uow_factory, buyer.id, product.id, OrderType.BUY, "1")

        report = ExecutePendingOrdersUseCase(uow_factory).execute()

        assert (report.executed, report.failed) == (1, 1)
        failed = next(o for o in report.outcomes if o.status == "failed")
        assert failed.user_id == seller.id
        assert "Insufficient quantity" in failed.message
        with uow_factory() as uow:
            pending = uow.orders.list_pending()
        assert [o.user_id for o in pending] == [seller.id]

    def test_order_stats(self, uow_factory, make_user, make_product) -> None:
        user = make_user()
        product = make_product(price=Decimal("10.00"))
        _place(uow_factory, user.id, product.id, OrderType.BUY, "2")
        cancelled = _place(uow_factory, user.id, product.id, OrderType.BUY, "1")
        CancelOrderUseCase(uow_factory).execute(cancelled.id, user.id)
        ExecutePendingOrdersUseCase(uow_factory).execute()
        _place(uow_factory, user.id, product.id, OrderType.BUY, "1", "5.00")

        stats = GetOrderStatsUseCase(uow_factory).execute(user.id)

        assert stats.total_orders == 3
        assert stats.executed_orders == 1
        assert stats.pending_orders == 1
        assert stats.cancelled_orders == 1
        assert stats.total_buy_amount == Decimal("20.00")


class TestAlerts:
    """Tests for alert maintenance and evaluation."""

    def _create(self, uow_factory, user_id, product_id, alert_type, target):
        return CreateAlertUseCase(uow_factory).execute(
            CreateAlertCommand(
                user_id=user_id,
                product_id=product_id,
                alert_type=alert_type,
                target_value=Decimal(target),
            )
        )

    def test_triggered_alert_deactivates_and_notifies(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("100.00"))
        alert = self._create(uow_factory, user.id, product.id, AlertType.PRICE_ABOVE, "120.00")

        assert CheckAlertsUseCase(uow_factory).execute().triggered == []

        _set_price(uow_factory, product.id, "121.00")
        report = CheckAlertsUseCase(uow_factory).execute()

        assert report.checked == 1
        assert [a.id for a in report.triggered] == [alert.id]
        with uow_factory() as uow:
            stored = uow.alerts.list_for_user(user.id)[0]
            notifications = uow.notifications.list_for_user(user.id)
        assert stored.is_active is False
        assert stored.triggered_at is not None
        assert notifications[0].type is NotificationType.ALERT
        assert CheckAlertsUseCase(uow_factory).execute().checked == 0

    def test_reactivating_clears_trigger_time(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product(price=Decimal("100.00"))
        alert = self._create(uow_factory, user.id, product.id, AlertType.PRICE_BELOW, "150.00")
        CheckAlertsUseCase(uow_factory).execute()

        updated = UpdateAlertUseCase(uow_factory).execute(
            UpdateAlertCommand(
                alert_id=alert.id,
                user_id=user.id,
                target_value=Decimal("50.00"),
                is_active=True,
            )
        )

        assert updated.is_active is True
        assert updated.triggered_at is None
        assert updated.target_value == Decimal("50.00")

    def test_other_users_alerts_are_not_found(
        self, uow_factory, make_user, make_product
    ) -> None:
        owner = make_user()
        other = make_user()
        product = make_product()
        alert = self._create(uow_factory, owner.id, product.id, AlertType.VOLUME_ABOVE, "10")

        with pytest.raises(ResourceNotFoundError):
            DeleteAlertUseCase(uow_factory).execute(alert.id, other.id)
        with pytest.raises(ResourceNotFoundError):
            UpdateAlertUseCase(uow_factory).execute(
                UpdateAlertCommand(alert_id=alert.id, user_id=other.id, is_active=False)
            )
