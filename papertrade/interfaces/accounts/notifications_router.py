"""
FastAPI router for in-app notifications.

Users manage their own notifications; admins create them.
Static paths are declared before `/{notification_id}` so they match first.
"""

from fastapi import APIRouter, Depends, Query, status

from papertrade.application.accounts.dtos import CreateNotificationCommand
from papertrade.application.accounts.notifications import (
    CreateBulkNotificationsUseCase,
    CreateNotificationUseCase,
    DeleteNotificationUseCase,
    GetNotificationStatsUseCase,
    GetUnreadCountUseCase,
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.accounts.dependencies import (
    get_create_bulk_notifications_use_case,
    get_create_notification_use_case,
    get_delete_notification_use_case,
    get_list_notifications_use_case,
    get_mark_all_read_use_case,
    get_mark_read_use_case,
    get_notification_stats_use_case,
    get_unread_count_use_case,
)
from papertrade.interfaces.accounts.schemas import (
    BulkNotificationData,
    BulkNotificationRequest,
    CreateNotificationRequest,
    MarkAllReadData,
    NotificationData,
    NotificationSchema,
    NotificationsData,
    NotificationStatsData,
    NotificationStatsSchema,
    UnreadCountData,
)
from papertrade.interfaces.dependencies import get_current_user, require_admin
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok

router = APIRouter(
    prefix="/notifications", tags=["notifications"], responses=ERROR_RESPONSES
)


def _to_command(request: CreateNotificationRequest) -> CreateNotificationCommand:
    return CreateNotificationCommand(
        user_id=request.user_id,
        type=request.type,
        title=request.title,
        message=request.message,
        data=request.data,
    )


@router.get("", response_model=Envelope[NotificationsData], summary="My notifications")
def list_notifications(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    use_case: ListNotificationsUseCase = Depends(get_list_notifications_use_case),
) -> dict:
    notifications = use_case.execute(user.id, limit=limit, offset=offset)
    return ok(
        NotificationsData(
            notifications=[NotificationSchema.model_validate(n) for n in notifications],
            limit=limit,
            offset=offset,
        )
    )


@router.get("/unread-count", response_model=Envelope[UnreadCountData], summary="Unread count")
def unread_count(
    user: User = Depends(get_current_user),
    use_case: GetUnreadCountUseCase = Depends(get_unread_count_use_case),
) -> dict:
    return ok(UnreadCountData(unread_count=use_case.execute(user.id)))


@router.get("/stats", response_model=Envelope[NotificationStatsData], summary="Counts by type")
def notification_stats(
    user: User = Depends(get_current_user),
    use_case: GetNotificationStatsUseCase = Depends(get_notification_stats_use_case),
) -> dict:
    stats = use_case.execute(user.id)
    return ok(NotificationStatsData(stats=NotificationStatsSchema.model_validate(stats)))


@router.patch(
    "/mark-all-read",
    response_model=Envelope[MarkAllReadData],
    summary="Mark all my notifications as read",
)
def mark_all_read(
    user: User = Depends(get_current_user),
    use_case: MarkAllNotificationsReadUseCase = Depends(get_mark_all_read_use_case),
) -> dict:
    updated = use_case.execute(user.id)
    return ok(
        MarkAllReadData(updated_count=updated),
        message=f"{updated} notifications marked as read",
    )


@router.post(
    "",
    response_model=Envelope[NotificationData],
    status_code=status.HTTP_201_CREATED,
    summary="Send a notification (admin)",
)
def create_notification(
    request: CreateNotificationRequest,
    _admin: User = Depends(require_admin),
    use_case: CreateNotificationUseCase = Depends(get_create_notification_use_case),
) -> dict:
    notification = use_case.execute(_to_command(request))
    return ok(
        NotificationData(notification=NotificationSchema.model_validate(notification)),
        message="Notification created",
    )


@router.post(
    "/bulk",
    response_model=Envelope[BulkNotificationData],
    status_code=status.HTTP_201_CREATED,
    summary="Send many notifications (admin)",
    description="Every recipient must exist, otherwise nothing is created.",
)
def create_bulk_notifications(
    request: BulkNotificationRequest,
    _admin: User = Depends(require_admin),
    use_case: CreateBulkNotificationsUseCase = Depends(
        get_create_bulk_notifications_use_case
    ),
) -> dict:
    created = use_case.execute([_to_command(item) for item in request.notifications])
    return ok(
        BulkNotificationData(
            notifications=[NotificationSchema.model_validate(n) for n in created],
            created_count=len(created),
        ),
        message=f"{len(created)} notifications created",
    )


@router.patch(
    "/{notification_id}/read",
    response_model=Envelope[NotificationData],
    summary="Mark one notification as read",
)
def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    use_case: MarkNotificationReadUseCase = Depends(get_mark_read_use_case),
) -> dict:
    notification = use_case.execute(notification_id, user.id)
    return ok(NotificationData(notification=NotificationSchema.model_validate(notification)))


@router.delete(
    "/{notification_id}",
    response_model=Envelope[None],
    summary="Delete one of my notifications",
)
def delete_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    use_case: DeleteNotificationUseCase = Depends(get_delete_notification_use_case),
) -> dict:
    use_case.execute(notification_id, user.id)
    return ok(message="Notification deleted")
