"""
FastAPI router for buying, selling and the transaction ledger.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, Query, status

from papertrade.application.audit_trail import RequestContext
from papertrade.application.trading.buy_product import BuyProductUseCase
from papertrade.application.trading.dtos import TradeCommand
from papertrade.application.trading.ledger import (
    GetTransactionStatsUseCase,
    ListAllTransactionsUseCase,
    ListUserTransactionsUseCase,
)
from papertrade.application.trading.sell_product import SellProductUseCase
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.dependencies import (
    get_current_user,
    get_request_context,
    require_admin,
)
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.dependencies import (
    get_all_transactions_use_case,
    get_buy_product_use_case,
    get_sell_product_use_case,
    get_transaction_stats_use_case,
    get_user_transactions_use_case,
)
from papertrade.interfaces.trading.schemas import (
    TradeData,
    TradeRequest,
    TransactionSchema,
    TransactionsData,
    TransactionStatsData,
    TransactionStatsSchema,
)

router = APIRouter(prefix="/transactions", tags=["transactions"], responses=ERROR_RESPONSES)


@router.post(
    "/buy",
    response_model=Envelope[TradeData],
    status_code=status.HTTP_201_CREATED,
    summary="Buy a product",
    description=(
        "Debit the wallet, record the transaction and update the portfolio "
        "in one database transaction."
    ),
)
def buy_product(
    request: TradeRequest,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: BuyProductUseCase = Depends(get_buy_product_use_case),
) -> dict:
    command = TradeCommand(user_id=user.id, product_id=request.product_id, units=request.units)
    result = use_case.execute(command, context)
    return ok(TradeData.model_validate(result), message="Product purchased successfully")


@router.post(
    "/sell",
    response_model=Envelope[TradeData],
    status_code=status.HTTP_201_CREATED,
    summary="Sell a product",
)
def sell_product(
    request: TradeRequest,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: SellProductUseCase = Depends(get_sell_product_use_case),
) -> dict:
    command = TradeCommand(user_id=user.id, product_id=request.product_id, units=request.units)
    result = use_case.execute(command, context)
    return ok(TradeData.model_validate(result), message="Product sold successfully")


@router.get(
    "/my",
    response_model=Envelope[TransactionsData],
    summary="My transactions",
)
def my_transactions(
    user: User = Depends(get_current_user),
    use_case: ListUserTransactionsUseCase = Depends(get_user_transactions_use_case),
) -> dict:
    transactions = use_case.execute(user.id)
    return ok(
        TransactionsData(
            transactions=[TransactionSchema.model_validate(t) for t in transactions]
        )
    )


@router.get(
    "/stats",
    response_model=Envelope[TransactionStatsData],
    summary="My transaction statistics",
)
def transaction_stats(
    user: User = Depends(get_current_user),
    use_case: GetTransactionStatsUseCase = Depends(get_transaction_stats_use_case),
) -> dict:
    stats = use_case.execute(user.id)
    return ok(TransactionStatsData(stats=TransactionStatsSchema.model_validate(stats)))


@router.get(
    "/all",
    response_model=Envelope[TransactionsData],
    summary="All transactions (admin)",
)
def all_transactions(
    limit: int = Query(default=100, ge=1, le=1000),
    _admin: User = Depends(require_admin),
    use_case: ListAllTransactionsUseCase = Depends(get_all_transactions_use_case),
) -> dict:
    transactions = use_case.execute(limit=limit)
    return ok(
        TransactionsData(
            transactions=[TransactionSchema.model_validate(t) for t in transactions]
        )
    )
