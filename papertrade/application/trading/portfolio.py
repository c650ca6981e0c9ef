"""
Use cases: Portfolio holdings, summary and analytics.

Input: user id
Output: holdings valued at current product prices
Side effects: None (read-only queries).
Failure cases: UserNotFoundError for the summary views.
"""

from collections import OrderedDict
from decimal import Decimal

from papertrade.application.trading.dtos import (
    CategoryAllocation,
    PortfolioAnalytics,
    PortfolioSummary,
    PortfolioSummaryResult,
)
from papertrade.domain.accounts.errors import UserNotFoundError
from papertrade.domain.trading.entities import Holding, round_money
from papertrade.domain.unit_of_work import UnitOfWorkFactory

ZERO = Decimal("0.00")


def summarize(holdings: list[Holding]) -> PortfolioSummary:
    """Total the cost basis and current value of a set of holdings."""
    total_invested = sum((h.total_invested for h in holdings), ZERO)
    current_value = sum((h.current_value for h in holdings), ZERO)
    returns = current_value - total_invested
    percentage = ZERO
    if total_invested > 0:
        percentage = round_money(returns / total_invested * 100)
    return PortfolioSummary(
        total_invested=total_invested,
        current_value=current_value,
        returns=returns,
        returns_percentage=percentage,
    )


def allocate_by_category(holdings: list[Holding]) -> list[CategoryAllocation]:
    """Split current value by category, largest first."""
    values: "OrderedDict[str, Decimal]" = OrderedDict()
    for holding in holdings:
        values[holding.category] = values.get(holding.category, ZERO) + holding.current_value
    grand_total = sum(values.values(), ZERO)

    allocation = [
        CategoryAllocation(
            category=category,
            current_value=value,
            percentage=round_money(value / grand_total * 100) if grand_total > 0 else ZERO,
        )
        for category, value in values.items()
    ]
    return sorted(allocation, key=lambda item: item.current_value, reverse=True)


class GetHoldingsUseCase:
    """Positions with quantity > 0 at current prices."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> list[Holding]:
        with self._uow_factory() as uow:
            return uow.portfolio.holdings_for_user(user_id)


class GetPortfolioSummaryUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> PortfolioSummaryResult:
        with self._uow_factory() as uow:
            user = uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            holdings = uow.portfolio.holdings_for_user(user_id)
        return PortfolioSummaryResult(
            summary=summarize(holdings), wallet_balance=user.wallet_balance
        )


class GetPortfolioAnalyticsUseCase:
    """Totals, per-holding P&L and category allocation for one user."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> PortfolioAnalytics:
        with self._uow_factory() as uow:
            user = uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            holdings = uow.portfolio.holdings_for_user(user_id)
        return PortfolioAnalytics(
            summary=summarize(holdings),
            holdings=holdings,
            allocation=allocate_by_category(holdings),
            wallet_balance=user.wallet_balance,
        )
