"""
FastAPI router for portfolio analytics.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends

from papertrade.application.trading.portfolio import GetPortfolioAnalyticsUseCase
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.dependencies import get_current_user
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.dependencies import get_portfolio_analytics_use_case
from papertrade.interfaces.trading.schemas import PortfolioAnalyticsData

router = APIRouter(prefix="/analytics", tags=["analytics"], responses=ERROR_RESPONSES)


@router.get(
    "/portfolio",
    response_model=Envelope[PortfolioAnalyticsData],
    summary="Portfolio analytics",
    description="Totals, per-holding P&L and allocation by category.",
)
def portfolio_analytics(
    user: User = Depends(get_current_user),
    use_case: GetPortfolioAnalyticsUseCase = Depends(get_portfolio_analytics_use_case),
) -> dict:
    return ok(PortfolioAnalyticsData.model_validate(use_case.execute(user.id)))
