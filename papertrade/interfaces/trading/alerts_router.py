"""
FastAPI router for price and volume alerts.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, status

from papertrade.application.trading.alerts import (
    CreateAlertUseCase,
    DeleteAlertUseCase,
    ListUserAlertsUseCase,
    UpdateAlertUseCase,
)
from papertrade.application.trading.check_alerts import CheckAlertsUseCase
from papertrade.application.trading.dtos import CreateAlertCommand, UpdateAlertCommand
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.dependencies import get_current_user, require_admin
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok
from papertrade.interfaces.trading.dependencies import (
    get_check_alerts_use_case,
    get_create_alert_use_case,
    get_delete_alert_use_case,
    get_update_alert_use_case,
    get_user_alerts_use_case,
)
from papertrade.interfaces.trading.schemas import (
    AlertCheckData,
    AlertData,
    AlertSchema,
    AlertsData,
    CreateAlertRequest,
    UpdateAlertRequest,
)

router = APIRouter(prefix="/alerts", tags=["alerts"], responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=Envelope[AlertData],
    status_code=status.HTTP_201_CREATED,
    summary="Create an alert",
)
def create_alert(
    request: CreateAlertRequest,
    user: User = Depends(get_current_user),
    use_case: CreateAlertUseCase = Depends(get_create_alert_use_case),
) -> dict:
    alert = use_case.execute(
        CreateAlertCommand(
            user_id=user.id,
            product_id=request.product_id,
            alert_type=request.alert_type,
            target_value=request.target_value,
        )
    )
    return ok(AlertData(alert=AlertSchema.model_validate(alert)), message="Alert created")


@router.get("", response_model=Envelope[AlertsData], summary="My alerts")
def list_alerts(
    user: User = Depends(get_current_user),
    use_case: ListUserAlertsUseCase = Depends(get_user_alerts_use_case),
) -> dict:
    alerts = use_case.execute(user.id)
    return ok(AlertsData(alerts=[AlertSchema.model_validate(a) for a in alerts]))


@router.post(
    "/check",
    response_model=Envelope[AlertCheckData],
    summary="Evaluate all active alerts (admin)",
)
def check_alerts(
    _admin: User = Depends(require_admin),
    use_case: CheckAlertsUseCase = Depends(get_check_alerts_use_case),
) -> dict:
    report = use_case.execute()
    return ok(
        AlertCheckData.model_validate(report),
        message=f"{len(report.triggered)} alerts triggered",
    )


@router.put("/{alert_id}", response_model=Envelope[AlertData], summary="Update an alert")
def update_alert(
    alert_id: int,
    request: UpdateAlertRequest,
    user: User = Depends(get_current_user),
    use_case: UpdateAlertUseCase = Depends(get_update_alert_use_case),
) -> dict:
    alert = use_case.execute(
        UpdateAlertCommand(
            alert_id=alert_id,
            user_id=user.id,
            alert_type=request.alert_type,
            target_value=request.target_value,
            is_active=request.is_active,
        )
    )
    return ok(AlertData(alert=AlertSchema.model_validate(alert)), message="Alert updated")


@router.delete("/{alert_id}", response_model=Envelope[None], summary="Delete an alert")
def delete_alert(
    alert_id: int,
    user: User = Depends(get_current_user),
    use_case: DeleteAlertUseCase = Depends(get_delete_alert_use_case),
) -> dict:
    use_case.execute(alert_id, user.id)
    return ok(message="Alert deleted")
