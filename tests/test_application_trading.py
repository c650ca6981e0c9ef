"""
Tests for the trading application layer (use cases).

Use cases run against a real SQLite database through SqlUnitOfWork so
that transaction boundaries and row locking are exercised.
"""

import threading
from decimal import Decimal
from functools import partial
from unittest.mock import MagicMock

import pytest

from papertrade.application.trading.buy_product import BuyProductUseCase
from papertrade.application.trading.catalog import (
    CreateProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
    UpdateProductPriceUseCase,
)
from papertrade.application.trading.dtos import CreateProductCommand, TradeCommand
from papertrade.application.trading.ledger import GetTransactionStatsUseCase
from papertrade.application.trading.portfolio import (
    GetPortfolioAnalyticsUseCase,
    GetPortfolioSummaryUseCase,
)
from papertrade.application.trading.sell_product import SellProductUseCase
from papertrade.application.trading.watchlist import (
    AddToWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from papertrade.domain.accounts.entities import AuditAction, AuditFilter, NotificationType
from papertrade.domain.accounts.errors import UserNotFoundError
from papertrade.domain.errors import ResourceNotFoundError, ValidationError
from papertrade.domain.trading.entities import TransactionType
from papertrade.domain.trading.errors import (
    AlreadyInWatchlistError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    ProductNotFoundError,
    TradeTooSmallError,
)
from papertrade.infrastructure.database.unit_of_work import SqlUnitOfWork


class NotificationOutageUnitOfWork(SqlUnitOfWork):
    """Unit of work whose notification store fails on write."""

    def __enter__(self) -> "NotificationOutageUnitOfWork":
        super().__enter__()
        self.notifications.add = MagicMock(side_effect=RuntimeError("notification store down"))
        return self


def _buy(uow_factory, user_id: int, product_id: int, units: str):
    return BuyProductUseCase(uow_factory).execute(
        TradeCommand(user_id=user_id, product_id=product_id, units=Decimal(units))
    )


def _sell(uow_factory, user_id: int, product_id: int, units: str):
    return SellProductUseCase(uow_factory).execute(
        TradeCommand(user_id=user_id, product_id=product_id, units=Decimal(units))
    )


class TestBuyProductUseCase:
    """Tests for the atomic purchase flow."""

    def test_buy_debits_wallet_and_opens_position(
        self, uow_factory, make_user, make_product
    ) -> None:
        """A purchase writes the ledger, debits the wallet and opens a position."""
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("245.50"))

        result = _buy(uow_factory, user.id, product.id, "2")

        assert result.transaction.type is TransactionType.BUY
        assert result.transaction.total_amount == Decimal("491.00")
        assert result.transaction.price_per_unit == Decimal("245.50")
        assert result.new_wallet_balance == Decimal("509.00")

        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("509.00")
            position = uow.portfolio.get(user.id, product.id)
            assert position.quantity == Decimal("2")
            assert position.average_price == Decimal("245.50")

    def test_buy_writes_notification_and_audit_entry(
        self, uow_factory, make_user, make_product
    ) -> None:
        """The notification and audit entry commit with the trade."""
        user = make_user()
        product = make_product()

        result = _buy(uow_factory, user.id, product.id, "1")

        with uow_factory() as uow:
            notifications = uow.notifications.list_for_user(user.id)
            entries = uow.audit_logs.search(AuditFilter(resource="transaction"))
        assert [n.type for n in notifications] == [NotificationType.TRANSACTION]
        assert len(entries) == 1
        assert entries[0].action is AuditAction.CREATE
        assert entries[0].resource_id == str(result.transaction.id)

    def test_repeat_buys_average_the_cost(self, uow_factory, make_user, make_product) -> None:
        """Buying 2 @ 100 then 1 @ 130 leaves 3 units at 110."""
        user = make_user()
        product = make_product(price=Decimal("100.00"))
        _buy(uow_factory, user.id, product.id, "2")

        with uow_factory() as uow:
            uow.products.update_price(product.id, Decimal("130.00"))
        _buy(uow_factory, user.id, product.id, "1")

        with uow_factory() as uow:
            position = uow.portfolio.get(user.id, product.id)
        assert position.quantity == Decimal("3")
        assert position.average_price == Decimal("110")

    def test_insufficient_funds_writes_nothing(
        self, uow_factory, make_user, make_product
    ) -> None:
        """A short wallet raises and leaves no trace."""
        user = make_user(balance=Decimal("100.00"))
        product = make_product(price=Decimal("60.00"))

        with pytest.raises(InsufficientFundsError):
            _buy(uow_factory, user.id, product.id, "2")

        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("100.00")
            assert uow.transactions.list_for_user(user.id) == []
            assert uow.portfolio.get(user.id, product.id) is None

    def test_exact_balance_is_allowed(self, uow_factory, make_user, make_product) -> None:
        """Spending the whole wallet leaves a zero balance."""
        user = make_user(balance=Decimal("120.00"))
        product = make_product(price=Decimal("60.00"))

        result = _buy(uow_factory, user.id, product.id, "2")

        assert result.new_wallet_balance == Decimal("0.00")

    def test_unknown_product_raises(self, uow_factory, make_user) -> None:
        user = make_user()
        with pytest.raises(ProductNotFoundError):
            _buy(uow_factory, user.id, 999, "1")

    def test_unknown_user_raises(self, uow_factory, make_product) -> None:
        product = make_product()
        with pytest.raises(UserNotFoundError):
            _buy(uow_factory, 999, product.id, "1")

    def test_non_positive_units_rejected(self, uow_factory, make_user, make_product) -> None:
        user = make_user()
        product = make_product()
        with pytest.raises(ValidationError):
            _buy(uow_factory, user.id, product.id, "0")

    def test_buy_worth_less_than_a_cent_is_rejected(
        self, uow_factory, make_user, make_product
    ) -> None:
        """0.0049 units at 1.00 rounds to a free trade, so nothing is written."""
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("1.00"))

        with pytest.raises(TradeTooSmallError):
            _buy(uow_factory, user.id, product.id, "0.0049")

        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("1000.00")
            assert uow.portfolio.get(user.id, product.id) is None
            assert uow.transactions.list_for_user(user.id) == []

    def test_smallest_billable_buy_costs_a_cent(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("1.00"))

        result = _buy(uow_factory, user.id, product.id, "0.005")

        assert result.transaction.total_amount == Decimal("0.01")
        assert result.new_wallet_balance == Decimal("999.99")

    def test_failure_after_debit_rolls_everything_back(
        self, engine, make_user, make_product
    ) -> None:
        """An error late in the flow undoes the ledger, wallet and position writes."""
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("100.00"))
        failing_factory = partial(NotificationOutageUnitOfWork, engine)

        with pytest.raises(RuntimeError):
            _buy(failing_factory, user.id, product.id, "3")

        with SqlUnitOfWork(engine) as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("1000.00")
            assert uow.transactions.count() == 0
            assert uow.portfolio.get(user.id, product.id) is None

    def test_concurrent_buys_cannot_overdraw(
        self, uow_factory, make_user, make_product
    ) -> None:
        """Two simultaneous buys that each fit the wallet alone: only one succeeds."""
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("600.00"))
        barrier = threading.Barrier(2)
        outcomes: list[object] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            try:
                result = _buy(uow_factory, user.id, product.id, "1")
            except InsufficientFundsError as exc:
                result = exc
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        failures = [o for o in outcomes if isinstance(o, InsufficientFundsError)]
        assert len(outcomes) == 2
        assert len(failures) == 1

        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("400.00")
            assert len(uow.transactions.list_for_user(user.id)) == 1
            assert uow.portfolio.get(user.id, product.id).quantity == Decimal("1")


class TestSellProductUseCase:
    """Tests for the sell flow."""

    def test_sell_credits_wallet_and_keeps_average(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("100.00"))
        _buy(uow_factory, user.id, product.id, "4")
        with uow_factory() as uow:
            uow.products.update_price(product.id, Decimal("150.00"))

        result = _sell(uow_factory, user.id, product.id, "1")

        assert result.transaction.type is TransactionType.SELL
        assert result.transaction.total_amount == Decimal("150.00")
        assert result.new_wallet_balance == Decimal("750.00")
        with uow_factory() as uow:
            position = uow.portfolio.get(user.id, product.id)
        assert position.quantity == Decimal("3")
        assert position.average_price == Decimal("100")

    def test_full_sell_keeps_zero_row_out_of_holdings(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product()
        _buy(uow_factory, user.id, product.id, "2")

        _sell(uow_factory, user.id, product.id, "2")

        with uow_factory() as uow:
            assert uow.portfolio.get(user.id, product.id).quantity == Decimal("0")
            assert uow.portfolio.holdings_for_user(user.id) == []

    def test_oversell_raises_and_writes_nothing(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("100.00"))
        _buy(uow_factory, user.id, product.id, "1")

        with pytest.raises(InsufficientHoldingsError):
            _sell(uow_factory, user.id, product.id, "2")

        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("900.00")
            assert len(uow.transactions.list_for_user(user.id)) == 1

    def test_sell_without_position_raises(self, uow_factory, make_user, make_product) -> None:
        user = make_user()
        product = make_product()
        with pytest.raises(InsufficientHoldingsError):
            _sell(uow_factory, user.id, product.id, "1")

    def test_sell_worth_less_than_a_cent_is_rejected(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user(balance=Decimal("1000.00"))
        product = make_product(price=Decimal("1.00"))
        _buy(uow_factory, user.id, product.id, "1")

        with pytest.raises(TradeTooSmallError):
            _sell(uow_factory, user.id, product.id, "0.0049")

        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).wallet_balance == Decimal("999.00")
            assert uow.portfolio.get(user.id, product.id).quantity == Decimal("1")


class TestCatalogUseCases:
    """Tests for catalog reads, writes and cache handling."""

    def test_list_products_fills_cache_on_miss(self, uow_factory, make_product) -> None:
        make_product(name="Alpha")
        cache = MagicMock()
        cache.get_products.return_value = None

        products = ListProductsUseCase(uow_factory, cache).execute()

        assert [p.name for p in products] == ["Alpha"]
        cache.set_products.assert_called_once_with(products)

    def test_list_products_serves_cache_hit(self, uow_factory) -> None:
        cached = [MagicMock(name="cached product")]
        cache = MagicMock()
        cache.get_products.return_value = cached

        assert ListProductsUseCase(uow_factory, cache).execute() is cached
        cache.set_products.assert_not_called()

    def test_writes_invalidate_cache(self, uow_factory, admin) -> None:
        cache = MagicMock()
        product = CreateProductUseCase(uow_factory, cache).execute(
            CreateProductCommand(name="Gamma", category="Stocks", price=Decimal("10.00")),
            admin_id=admin.id,
        )
        UpdateProductPriceUseCase(uow_factory, cache).execute(
            product.id, Decimal("12.50"), admin_id=admin.id
        )

        assert cache.invalidate.call_count == 2
        with uow_factory() as uow:
            assert uow.products.get_by_id(product.id).price == Decimal("12.50")

    def test_search_requires_two_characters(self, uow_factory) -> None:
        with pytest.raises(ValidationError):
            SearchProductsUseCase(uow_factory).execute(" a ")

    def test_search_matches_name_or_category(self, uow_factory, make_product) -> None:
        make_product(name="Reliance Industries", category="Stocks")
        make_product(name="Bluechip Fund", category="Mutual Funds")

        by_name = SearchProductsUseCase(uow_factory).execute("relia")
        by_category = SearchProductsUseCase(uow_factory).execute("MUTUAL")

        assert [p.name for p in by_name] == ["Reliance Industries"]
        assert [p.name for p in by_category] == ["Bluechip Fund"]

    def test_get_product_reports_watch_state(self, uow_factory, make_user, make_product) -> None:
        user = make_user()
        product = make_product()
        AddToWatchlistUseCase(uow_factory).execute(user.id, product.id)

        anonymous = GetProductUseCase(uow_factory).execute(product.id)
        watched = GetProductUseCase(uow_factory).execute(product.id, viewer_id=user.id)

        assert anonymous.is_watched is None
        assert watched.is_watched is True


class TestWatchlistUseCases:
    """Tests for watchlist membership."""

    def test_second_add_is_rejected_and_keeps_one_row(
        self, uow_factory, make_user, make_product
    ) -> None:
        user = make_user()
        product = make_product()
        AddToWatchlistUseCase(uow_factory).execute(user.id, product.id)

        with pytest.raises(AlreadyInWatchlistError):
            AddToWatchlistUseCase(uow_factory).execute(user.id, product.id)

        with uow_factory() as uow:
            assert len(uow.watchlist.list_products(user.id)) == 1

    def test_add_unknown_product_raises(self, uow_factory, make_user) -> None:
        user = make_user()
        with pytest.raises(ProductNotFoundError):
            AddToWatchlistUseCase(uow_factory).execute(user.id, 404)

    def test_remove_missing_entry_raises(self, uow_factory, make_user, make_product) -> None:
        user = make_user()
        product = make_product()
        with pytest.raises(ResourceNotFoundError):
            RemoveFromWatchlistUseCase(uow_factory).execute(user.id, product.id)


class TestPortfolioUseCases:
    """Tests for portfolio summaries and analytics."""

    def test_summary_reflects_price_moves(self, uow_factory, make_user, make_product) -> None:
        user = make_user(balance=Decimal("10000.00"))
        product = make_product(price=Decimal("100.00"))
        _buy(uow_factory, user.id, product.id, "10")
        with uow_factory() as uow:
            uow.products.update_price(product.id, Decimal("110.00"))

        result = GetPortfolioSummaryUseCase(uow_factory).execute(user.id)

        assert result.summary.total_invested == Decimal("1000.00")
        assert result.summary.current_value == Decimal("1100.00")
        assert result.summary.returns == Decimal("100.00")
        assert result.summary.returns_percentage == Decimal("10.00")
        assert result.wallet_balance == Decimal("9000.00")

    def test_empty_portfolio_has_zero_return(self, uow_factory, make_user) -> None:
        user = make_user()
        result = GetPortfolioSummaryUseCase(uow_factory).execute(user.id)
        assert result.summary.total_invested == Decimal("0")
        assert result.summary.returns_percentage == Decimal("0")

    def test_analytics_allocates_by_category(self, uow_factory, make_user, make_product) -> None:
        user = make_user(balance=Decimal("10000.00"))
        stock = make_product(category="Stocks", price=Decimal("300.00"))
        fund = make_product(category="Mutual Funds", price=Decimal("100.00"))
        _buy(uow_factory, user.id, stock.id, "1")
        _buy(uow_factory, user.id, fund.id, "1")

        analytics = GetPortfolioAnalyticsUseCase(uow_factory).execute(user.id)

        allocation = {a.category: a.percentage for a in analytics.allocation}
        assert allocation == {"Stocks": Decimal("75.00"), "Mutual Funds": Decimal("25.00")}
        assert analytics.allocation[0].category == "Stocks"
        assert len(analytics.holdings) == 2

    def test_transaction_stats(self, uow_factory, make_user, make_product) -> None:
        user = make_user()
        product = make_product(price=Decimal("50.00"))
        _buy(uow_factory, user.id, product.id, "3")
        _sell(uow_factory, user.id, product.id, "1")

        stats = GetTransactionStatsUseCase(uow_factory).execute(user.id)

        assert stats.total_transactions == 2
        assert stats.total_invested == Decimal("150.00")
        assert stats.total_units == Decimal("2")
