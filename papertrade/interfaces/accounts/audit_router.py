"""
FastAPI router for the audit trail.

All routes delegate to use cases. No business logic here.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from papertrade.application.accounts.audit import (
    DEFAULT_RETENTION_DAYS,
    CleanAuditLogsUseCase,
    GetAuditStatsUseCase,
    GetResourceActivityUseCase,
    GetUserActivityUseCase,
    ListAuditLogsUseCase,
)
from papertrade.domain.accounts.entities import AuditAction, AuditFilter, User
from papertrade.interfaces.accounts.dependencies import (
    get_audit_stats_use_case,
    get_clean_audit_logs_use_case,
    get_list_audit_logs_use_case,
    get_resource_activity_use_case,
    get_user_activity_use_case,
)
from papertrade.interfaces.accounts.schemas import (
    ActivityDaySchema,
    AuditCleanData,
    AuditEntrySchema,
    AuditLogsData,
    AuditStatsData,
    AuditStatsSchema,
    ResourceActivityData,
    UserActivityData,
)
from papertrade.interfaces.dependencies import get_current_user, require_admin
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok

router = APIRouter(prefix="/audit", tags=["audit"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=Envelope[AuditLogsData],
    summary="Search the audit trail (admin)",
)
def list_audit_logs(
    user_id: Optional[int] = Query(default=None, gt=0),
    action: Optional[AuditAction] = Query(default=None),
    resource: Optional[str] = Query(default=None, max_length=50),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    _admin: User = Depends(require_admin),
    use_case: ListAuditLogsUseCase = Depends(get_list_audit_logs_use_case),
) -> dict:
    filters = AuditFilter(
        user_id=user_id,
        action=action,
        resource=resource,
        start_date=start_date,
        end_date=end_date,
    )
    entries = use_case.execute(filters, limit=limit, offset=offset)
    return ok(
        AuditLogsData(
            logs=[AuditEntrySchema.model_validate(e) for e in entries],
            limit=limit,
            offset=offset,
        )
    )


@router.get("/stats", response_model=Envelope[AuditStatsData], summary="Audit counts (admin)")
def audit_stats(
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    _admin: User = Depends(require_admin),
    use_case: GetAuditStatsUseCase = Depends(get_audit_stats_use_case),
) -> dict:
    stats = use_case.execute(start_date=start_date, end_date=end_date)
    return ok(AuditStatsData(stats=AuditStatsSchema.model_validate(stats)))


@router.get(
    "/user-activity",
    response_model=Envelope[UserActivityData],
    summary="My activity per day",
)
def user_activity(
    days: int = Query(default=30, ge=1, le=365),
    user: User = Depends(get_current_user),
    use_case: GetUserActivityUseCase = Depends(get_user_activity_use_case),
) -> dict:
    activity = use_case.execute(user.id, days=days)
    return ok(UserActivityData(activity=[ActivityDaySchema.model_validate(a) for a in activity]))


@router.get(
    "/resource/{resource}/{resource_id}",
    response_model=Envelope[ResourceActivityData],
    summary="Audit entries for one resource",
)
def resource_activity(
    resource: str,
    resource_id: str,
    limit: int = Query(default=50, ge=1, le=100),
    _user: User = Depends(get_current_user),
    use_case: GetResourceActivityUseCase = Depends(get_resource_activity_use_case),
) -> dict:
    entries = use_case.execute(resource, resource_id, limit=limit)
    return ok(
        ResourceActivityData(
            resource=resource,
            resource_id=resource_id,
            logs=[AuditEntrySchema.model_validate(e) for e in entries],
        )
    )


@router.post(
    "/clean",
    response_model=Envelope[AuditCleanData],
    summary="Delete old audit entries (admin)",
)
def clean_audit_logs(
    days_to_keep: int = Query(default=DEFAULT_RETENTION_DAYS),
    _admin: User = Depends(require_admin),
    use_case: CleanAuditLogsUseCase = Depends(get_clean_audit_logs_use_case),
) -> dict:
    deleted = use_case.execute(days_to_keep)
    return ok(
        AuditCleanData(deleted_count=deleted, days_to_keep=days_to_keep),
        message=f"Deleted {deleted} audit log entries",
    )
