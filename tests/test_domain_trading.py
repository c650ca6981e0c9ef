"""
Tests for the trading domain layer.

Tests domain entities and error classes in isolation.
No external dependencies or IO required.
"""

from decimal import Decimal

import pytest

from papertrade.domain.errors import BusinessRuleError, NotFoundError
from papertrade.domain.trading.entities import (
    Alert,
    AlertType,
    Holding,
    Order,
    OrderStatus,
    OrderType,
    PortfolioPosition,
    Product,
    round_money,
    trade_total,
)
from papertrade.domain.trading.errors import (
    InsufficientFundsError,
    InsufficientHoldingsError,
    ProductNotFoundError,
)


def _product(price: str = "100.00", volume=1000) -> Product:
    return Product(id=1, name="Acme", category="Stocks", price=Decimal(price), volume=volume)


def _order(order_type: OrderType, order_price=None) -> Order:
    return Order(
        id=1,
        user_id=1,
        product_id=1,
        order_type=order_type,
        order_status=OrderStatus.PENDING,
        quantity=Decimal("1"),
        price=Decimal("100.00"),
        order_price=Decimal(order_price) if order_price else None,
    )


def _alert(alert_type: AlertType, target: str) -> Alert:
    return Alert(
        id=1,
        user_id=1,
        product_id=1,
        alert_type=alert_type,
        target_value=Decimal(target),
        is_active=True,
    )


class TestMoney:
    """Tests for currency rounding."""

    def test_round_money_rounds_half_up(self) -> None:
        """Half a cent rounds away from zero."""
        assert round_money(Decimal("10.005")) == Decimal("10.01")
        assert round_money(Decimal("10.004")) == Decimal("10.00")

    def test_trade_total_uses_units_times_price(self) -> None:
        """Trade totals are rounded to cents."""
        assert trade_total(Decimal("0.3333"), Decimal("100.00")) == Decimal("33.33")
        assert trade_total(Decimal("2"), Decimal("245.50")) == Decimal("491.00")


class TestPortfolioPosition:
    """Tests for the weighted-average cost of a position."""

    def test_first_buy_opens_position_at_fill_price(self) -> None:
        """A new position carries the units and price of its first fill."""
        position = PortfolioPosition.opened(1, 2, Decimal("5"), Decimal("100.00"))
        assert position.quantity == Decimal("5")
        assert position.average_price == Decimal("100.00")

    def test_second_buy_updates_weighted_average(self) -> None:
        """2 @ 100 then 1 @ 130 averages to 110."""
        position = PortfolioPosition.opened(1, 2, Decimal("2"), Decimal("100.00"))
        position = position.after_buy(Decimal("1"), Decimal("130.00"))
        assert position.quantity == Decimal("3")
        assert position.average_price == Decimal("110.000000")

    def test_average_price_is_quantized(self) -> None:
        """Non-terminating averages are rounded to six decimals."""
        position = PortfolioPosition.opened(1, 2, Decimal("1"), Decimal("100.00"))
        position = position.after_buy(Decimal("2"), Decimal("100.01"))
        assert position.average_price == Decimal("100.006667")

    def test_sell_keeps_average_price(self) -> None:
        """Selling reduces quantity only."""
        position = PortfolioPosition.opened(1, 2, Decimal("4"), Decimal("50.00"))
        position = position.after_sell(Decimal("4"))
        assert position.quantity == Decimal("0")
        assert position.average_price == Decimal("50.00")

    def test_oversell_raises(self) -> None:
        """Selling more than held raises InsufficientHoldingsError."""
        position = PortfolioPosition.opened(1, 2, Decimal("1"), Decimal("50.00"))
        with pytest.raises(InsufficientHoldingsError):
            position.after_sell(Decimal("1.5"))


class TestHolding:
    """Tests for derived holding values."""

    def test_values_and_return(self) -> None:
        """Current value, P&L and return follow the current price."""
        holding = Holding(
            product_id=1,
            product_name="Acme",
            category="Stocks",
            current_price=Decimal("120.00"),
            quantity=Decimal("2"),
            average_price=Decimal("100.00"),
        )
        assert holding.total_invested == Decimal("200.00")
        assert holding.current_value == Decimal("240.00")
        assert holding.unrealized_pnl == Decimal("40.00")
        assert holding.return_percentage == Decimal("20.00")

    def test_zero_quantity_has_zero_return(self) -> None:
        """No cost basis means a 0% return instead of a division error."""
        holding = Holding(
            product_id=1,
            product_name="Acme",
            category="Stocks",
            current_price=Decimal("120.00"),
            quantity=Decimal("0"),
            average_price=Decimal("100.00"),
        )
        assert holding.return_percentage == Decimal("0")


class TestOrderLimits:
    """Tests for limit order fill conditions."""

    def test_market_order_always_fills(self) -> None:
        assert _order(OrderType.BUY).limit_allows(Decimal("999.00"))
        assert _order(OrderType.SELL).limit_allows(Decimal("0.01"))

    def test_buy_limit_fills_at_or_below_limit(self) -> None:
        order = _order(OrderType.BUY, "100.00")
        assert order.limit_allows(Decimal("100.00"))
        assert order.limit_allows(Decimal("99.99"))
        assert not order.limit_allows(Decimal("100.01"))

    def test_sell_limit_fills_at_or_above_limit(self) -> None:
        order = _order(OrderType.SELL, "100.00")
        assert order.limit_allows(Decimal("100.00"))
        assert order.limit_allows(Decimal("100.01"))
        assert not order.limit_allows(Decimal("99.99"))


class TestAlertConditions:
    """Tests for alert trigger conditions."""

    def test_price_above_is_strict(self) -> None:
        alert = _alert(AlertType.PRICE_ABOVE, "100.00")
        assert not alert.is_triggered_by(_product("100.00"))
        assert alert.is_triggered_by(_product("100.01"))

    def test_price_below_is_strict(self) -> None:
        alert = _alert(AlertType.PRICE_BELOW, "100.00")
        assert not alert.is_triggered_by(_product("100.00"))
        assert alert.is_triggered_by(_product("99.99"))

    def test_volume_above(self) -> None:
        alert = _alert(AlertType.VOLUME_ABOVE, "5000")
        assert alert.is_triggered_by(_product(volume=5001))
        assert not alert.is_triggered_by(_product(volume=5000))
        assert not alert.is_triggered_by(_product(volume=None))


class TestDomainErrors:
    """Tests for domain error classes."""

    def test_product_not_found_is_not_found(self) -> None:
        error = ProductNotFoundError(7)
        assert isinstance(error, NotFoundError)
        assert error.message == "Product not found"
        assert error.product_id == 7

    def test_insufficient_funds_error_message(self) -> None:
        """InsufficientFundsError contains required and available amounts."""
        error = InsufficientFundsError(required="500.00", available="120.00")
        assert isinstance(error, BusinessRuleError)
        assert "500.00" in error.message
        assert "120.00" in error.message
