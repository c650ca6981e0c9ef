"""
FastAPI router for orders.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, Query, status

from papertrade.application.audit_trail import RequestContext
from papertrade.application.trading.dtos import CreateOrderCommand
from papertrade.application.trading.execute_orders import ExecutePendingOrdersUseCase
from papertrade.application.trading.orders import (
    CancelOrderUseCase,
    CreateOrderUseCase,
    GetOrderStatsUseCase,
    ListPendingOrdersUseCase,
    ListUserOrdersUseCase,
)
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.dependencies import (
    get_current_user,
    get_request_context,
    require_admin,
)
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.dependencies import (
    get_cancel_order_use_case,
    get_create_order_use_case,
    get_execute_orders_use_case,
    get_order_stats_use_case,
    get_pending_orders_use_case,
    get_user_orders_use_case,
)
from papertrade.interfaces.trading.schemas import (
    CreateOrderRequest,
    OrderData,
    OrderExecutionReportSchema,
    OrderSchema,
    OrdersData,
    OrderStatsData,
    OrderStatsSchema,
    PendingOrdersData,
)

router = APIRouter(prefix="/orders", tags=["orders"], responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=Envelope[OrderData],
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="Stores a pending order. Set `order_price` for a limit order.",
)
def create_order(
    request: CreateOrderRequest,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case),
) -> dict:
    command = CreateOrderCommand(
        user_id=user.id,
        product_id=request.product_id,
        order_type=request.order_type,
        quantity=request.quantity,
        order_price=request.order_price,
    )
    order = use_case.execute(command, context)
    return ok(
        OrderData(order=OrderSchema.model_validate(order)),
        message="Order placed successfully",
    )


@router.get("", response_model=Envelope[OrdersData], summary="My orders")
def list_orders(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    use_case: ListUserOrdersUseCase = Depends(get_user_orders_use_case),
) -> dict:
    return ok(OrdersData.model_validate(use_case.execute(user.id, limit, offset)))


@router.get("/stats", response_model=Envelope[OrderStatsData], summary="My order statistics")
def order_stats(
    user: User = Depends(get_current_user),
    use_case: GetOrderStatsUseCase = Depends(get_order_stats_use_case),
) -> dict:
    stats = use_case.execute(user.id)
    return ok(OrderStatsData(stats=OrderStatsSchema.model_validate(stats)))


@router.get(
    "/pending",
    response_model=Envelope[PendingOrdersData],
    summary="All pending orders (admin)",
)
def pending_orders(
    _admin: User = Depends(require_admin),
    use_case: ListPendingOrdersUseCase = Depends(get_pending_orders_use_case),
) -> dict:
    orders = use_case.execute()
    return ok(PendingOrdersData(orders=[OrderSchema.model_validate(o) for o in orders]))


@router.post(
    "/execute",
    response_model=Envelope[OrderExecutionReportSchema],
    summary="Execute pending orders (admin)",
    description=(
        "Runs every pending order at the current price, each in its own "
        "transaction. Unmet limit orders stay pending."
    ),
)
def execute_orders(
    _admin: User = Depends(require_admin),
    use_case: ExecutePendingOrdersUseCase = Depends(get_execute_orders_use_case),
) -> dict:
    report = use_case.execute()
    return ok(
        OrderExecutionReportSchema.model_validate(report),
        message=f"Executed {report.executed} of {report.processed} pending orders",
    )


@router.delete(
    "/{order_id}",
    response_model=Envelope[OrderData],
    summary="Cancel one of my pending orders",
)
def cancel_order(
    order_id: int,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case),
) -> dict:
    order = use_case.execute(order_id, user.id, context)
    return ok(
        OrderData(order=OrderSchema.model_validate(order)),
        message="Order cancelled successfully",
    )
