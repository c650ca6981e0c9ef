"""
FastAPI router for the administrator console.

Every route requires the admin role.
"""

from fastapi import APIRouter, Depends

from papertrade.application.accounts.admin import (
    AdjustWalletUseCase,
    GetDashboardUseCase,
    GetUserDetailUseCase,
    ListUsersUseCase,
)
from papertrade.application.audit_trail import RequestContext
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.accounts.dependencies import (
    get_adjust_wallet_use_case,
    get_dashboard_use_case,
    get_list_users_use_case,
    get_user_detail_use_case,
)
from papertrade.interfaces.accounts.schemas import (
    DashboardData,
    DashboardStatsSchema,
    UserData,
    UserDetailData,
    UserSchema,
    UsersData,
    WalletAdjustRequest,
)
from papertrade.interfaces.dependencies import get_request_context, require_admin
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.schemas import (
    HoldingSchema,
    ProductActivitySchema,
    TransactionSchema,
)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)


@router.get("/dashboard", response_model=Envelope[DashboardData], summary="Platform overview")
def dashboard(use_case: GetDashboardUseCase = Depends(get_dashboard_use_case)) -> dict:
    result = use_case.execute()
    return ok(
        DashboardData(
            stats=DashboardStatsSchema.model_validate(result.stats),
            recent_transactions=[
                TransactionSchema.model_validate(t) for t in result.recent_transactions
            ],
            top_products=[ProductActivitySchema.model_validate(p) for p in result.top_products],
        )
    )


@router.get("/users", response_model=Envelope[UsersData], summary="All users")
def list_users(use_case: ListUsersUseCase = Depends(get_list_users_use_case)) -> dict:
    return ok(UsersData(users=[UserSchema.model_validate(u) for u in use_case.execute()]))


@router.get(
    "/users/{user_id}",
    response_model=Envelope[UserDetailData],
    summary="One user with ledger and holdings",
)
def get_user(
    user_id: int,
    use_case: GetUserDetailUseCase = Depends(get_user_detail_use_case),
) -> dict:
    detail = use_case.execute(user_id)
    return ok(
        UserDetailData(
            user=UserSchema.model_validate(detail.user),
            transactions=[TransactionSchema.model_validate(t) for t in detail.transactions],
            holdings=[HoldingSchema.model_validate(h) for h in detail.holdings],
        )
    )


@router.put(
    "/users/{user_id}/wallet",
    response_model=Envelope[UserData],
    summary="Adjust a wallet balance",
    description="Adds `amount` (negative to remove). The balance cannot go below zero.",
)
def adjust_wallet(
    user_id: int,
    request: WalletAdjustRequest,
    admin: User = Depends(require_admin),
    context: RequestContext = Depends(get_request_context),
    use_case: AdjustWalletUseCase = Depends(get_adjust_wallet_use_case),
) -> dict:
    user = use_case.execute(user_id, request.amount, admin.id, context)
    return ok(
        UserData(user=UserSchema.model_validate(user)),
        message="Wallet balance updated successfully",
    )
