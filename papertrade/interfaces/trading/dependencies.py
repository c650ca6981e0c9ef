"""
Dependency injection for the trading bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the trading context.
"""

from fastapi import Depends

from papertrade.application.trading.alerts import (
    CreateAlertUseCase,
    DeleteAlertUseCase,
    ListUserAlertsUseCase,
    UpdateAlertUseCase,
)
from papertrade.application.trading.buy_product import BuyProductUseCase
from papertrade.application.trading.catalog import (
    CreateProductUseCase,
    GetProductUseCase,
    ListProductsByCategoryUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
    UpdateProductPriceUseCase,
)
from papertrade.application.trading.check_alerts import CheckAlertsUseCase
from papertrade.application.trading.execute_orders import ExecutePendingOrdersUseCase
from papertrade.application.trading.ledger import (
    GetTransactionStatsUseCase,
    ListAllTransactionsUseCase,
    ListUserTransactionsUseCase,
)
from papertrade.application.trading.orders import (
    CancelOrderUseCase,
    CreateOrderUseCase,
    GetOrderStatsUseCase,
    ListPendingOrdersUseCase,
    ListUserOrdersUseCase,
)
from papertrade.application.trading.portfolio import (
    GetHoldingsUseCase,
    GetPortfolioAnalyticsUseCase,
    GetPortfolioSummaryUseCase,
)
from papertrade.application.trading.sell_product import SellProductUseCase
from papertrade.application.trading.watchlist import (
    AddToWatchlistUseCase,
    GetWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from papertrade.domain.trading.ports import ProductCatalogCache
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.interfaces.dependencies import get_product_cache, get_uow_factory


# ── Products ──────────────────────────────────────────────────────


def get_list_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    cache: ProductCatalogCache = Depends(get_product_cache),
) -> ListProductsUseCase:
    """Build ListProductsUseCase with the database and product cache."""
    return ListProductsUseCase(uow_factory=uow_factory, cache=cache)


def get_search_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> SearchProductsUseCase:
    return SearchProductsUseCase(uow_factory=uow_factory)


def get_products_by_category_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListProductsByCategoryUseCase:
    return ListProductsByCategoryUseCase(uow_factory=uow_factory)


def get_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetProductUseCase:
    return GetProductUseCase(uow_factory=uow_factory)


def get_create_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    cache: ProductCatalogCache = Depends(get_product_cache),
) -> CreateProductUseCase:
    return CreateProductUseCase(uow_factory=uow_factory, cache=cache)


def get_update_product_price_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    cache: ProductCatalogCache = Depends(get_product_cache),
) -> UpdateProductPriceUseCase:
    return UpdateProductPriceUseCase(uow_factory=uow_factory, cache=cache)


# ── Transactions ──────────────────────────────────────────────────


def get_buy_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> BuyProductUseCase:
    """Build BuyProductUseCase with its unit of work."""
    return BuyProductUseCase(uow_factory=uow_factory)


def get_sell_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> SellProductUseCase:
    return SellProductUseCase(uow_factory=uow_factory)


def get_user_transactions_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListUserTransactionsUseCase:
    return ListUserTransactionsUseCase(uow_factory=uow_factory)


def get_transaction_stats_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetTransactionStatsUseCase:
    return GetTransactionStatsUseCase(uow_factory=uow_factory)


def get_all_transactions_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListAllTransactionsUseCase:
    return ListAllTransactionsUseCase(uow_factory=uow_factory)


# ── Portfolio & watchlist ─────────────────────────────────────────


def get_holdings_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetHoldingsUseCase:
    return GetHoldingsUseCase(uow_factory=uow_factory)


def get_portfolio_summary_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetPortfolioSummaryUseCase:
    return GetPortfolioSummaryUseCase(uow_factory=uow_factory)


def get_portfolio_analytics_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetPortfolioAnalyticsUseCase:
    return GetPortfolioAnalyticsUseCase(uow_factory=uow_factory)


def get_watchlist_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetWatchlistUseCase:
    return GetWatchlistUseCase(uow_factory=uow_factory)


def get_add_to_watchlist_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> AddToWatchlistUseCase:
    return AddToWatchlistUseCase(uow_factory=uow_factory)


def get_remove_from_watchlist_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> RemoveFromWatchlistUseCase:
    return RemoveFromWatchlistUseCase(uow_factory=uow_factory)


# ── Orders ────────────────────────────────────────────────────────


def get_create_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CreateOrderUseCase:
    return CreateOrderUseCase(uow_factory=uow_factory)


def get_user_orders_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListUserOrdersUseCase:
    return ListUserOrdersUseCase(uow_factory=uow_factory)


def get_order_stats_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetOrderStatsUseCase:
    return GetOrderStatsUseCase(uow_factory=uow_factory)


def get_cancel_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CancelOrderUseCase:
    return CancelOrderUseCase(uow_factory=uow_factory)


def get_pending_orders_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListPendingOrdersUseCase:
    return ListPendingOrdersUseCase(uow_factory=uow_factory)


def get_execute_orders_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ExecutePendingOrdersUseCase:
    return ExecutePendingOrdersUseCase(uow_factory=uow_factory)


# ── Alerts ────────────────────────────────────────────────────────


def get_create_alert_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CreateAlertUseCase:
    return CreateAlertUseCase(uow_factory=uow_factory)


def get_user_alerts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListUserAlertsUseCase:
    return ListUserAlertsUseCase(uow_factory=uow_factory)


def get_update_alert_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> UpdateAlertUseCase:
    return UpdateAlertUseCase(uow_factory=uow_factory)


def get_delete_alert_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DeleteAlertUseCase:
    return DeleteAlertUseCase(uow_factory=uow_factory)


def get_check_alerts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CheckAlertsUseCase:
    return CheckAlertsUseCase(uow_factory=uow_factory)
