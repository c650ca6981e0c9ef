"""
FastAPI router for portfolio holdings and the watchlist.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, status

from papertrade.application.trading.portfolio import (
    GetHoldingsUseCase,
    GetPortfolioSummaryUseCase,
)
from papertrade.application.trading.watchlist import (
    AddToWatchlistUseCase,
    GetWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.dependencies import get_current_user
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.dependencies import (
    get_add_to_watchlist_use_case,
    get_holdings_use_case,
    get_portfolio_summary_use_case,
    get_remove_from_watchlist_use_case,
    get_watchlist_use_case,
)
from papertrade.interfaces.trading.schemas import (
    HoldingSchema,
    HoldingsData,
    PortfolioSummaryData,
    ProductData,
    ProductDetailSchema,
    ProductSchema,
    WatchlistData,
)

router = APIRouter(prefix="/portfolio", tags=["portfolio"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=Envelope[HoldingsData],
    summary="My holdings",
    description="Positions with quantity above zero, valued at current prices.",
)
def get_holdings(
    user: User = Depends(get_current_user),
    use_case: GetHoldingsUseCase = Depends(get_holdings_use_case),
) -> dict:
    holdings = use_case.execute(user.id)
    return ok(HoldingsData(holdings=[HoldingSchema.model_validate(h) for h in holdings]))


@router.get(
    "/summary",
    response_model=Envelope[PortfolioSummaryData],
    summary="Portfolio summary",
)
def get_summary(
    user: User = Depends(get_current_user),
    use_case: GetPortfolioSummaryUseCase = Depends(get_portfolio_summary_use_case),
) -> dict:
    return ok(PortfolioSummaryData.model_validate(use_case.execute(user.id)))


@router.get(
    "/watchlist",
    response_model=Envelope[WatchlistData],
    summary="My watchlist",
)
def get_watchlist(
    user: User = Depends(get_current_user),
    use_case: GetWatchlistUseCase = Depends(get_watchlist_use_case),
) -> dict:
    products = use_case.execute(user.id)
    return ok(WatchlistData(watchlist=[ProductSchema.model_validate(p) for p in products]))


@router.post(
    "/watchlist/{product_id}",
    response_model=Envelope[ProductData],
    status_code=status.HTTP_201_CREATED,
    summary="Add a product to my watchlist",
    description="A product can be watched once; a second add returns 400.",
)
def add_to_watchlist(
    product_id: int,
    user: User = Depends(get_current_user),
    use_case: AddToWatchlistUseCase = Depends(get_add_to_watchlist_use_case),
) -> dict:
    product = use_case.execute(user.id, product_id)
    detail = ProductDetailSchema(
        **ProductSchema.model_validate(product).model_dump(), is_watched=True
    )
    return ok(ProductData(product=detail), message="Product added to watchlist")


@router.delete(
    "/watchlist/{product_id}",
    response_model=Envelope[None],
    summary="Remove a product from my watchlist",
)
def remove_from_watchlist(
    product_id: int,
    user: User = Depends(get_current_user),
    use_case: RemoveFromWatchlistUseCase = Depends(get_remove_from_watchlist_use_case),
) -> dict:
    use_case.execute(user.id, product_id)
    return ok(message="Product removed from watchlist")
