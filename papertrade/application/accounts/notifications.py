"""
Use cases: In-app notifications.

Users read and manage their own notifications. Administrators create
them one at a time or in bulk; a bulk request is all-or-nothing.
"""

import logging

from papertrade.application.accounts.dtos import CreateNotificationCommand
from papertrade.domain.accounts.entities import (
    Notification,
    NotificationDraft,
    NotificationStats,
)
from papertrade.domain.accounts.errors import UserNotFoundError
from papertrade.domain.errors import ResourceNotFoundError, ValidationError
from papertrade.domain.unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _notification_not_found(notification_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError("Notification", notification_id)


def _to_draft(command: CreateNotificationCommand) -> NotificationDraft:
    return NotificationDraft(
        user_id=command.user_id,
        type=command.type,
        title=command.title,
        message=command.message,
        data=command.data,
    )


def _require_users(uow: UnitOfWork, user_ids: set[int]) -> None:
    for user_id in sorted(user_ids):
        if uow.users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)


class ListNotificationsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, limit: int = 50, offset: int = 0) -> list[Notification]:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError("Limit must be between 1 and 100")
        if offset < 0:
            raise ValidationError("Offset must not be negative")
        with self._uow_factory() as uow:
            return uow.notifications.list_for_user(user_id, limit=limit, offset=offset)


class GetUnreadCountUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> int:
        with self._uow_factory() as uow:
            return uow.notifications.unread_count(user_id)


class GetNotificationStatsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> NotificationStats:
        with self._uow_factory() as uow:
            return uow.notifications.stats(user_id)


class MarkNotificationReadUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, notification_id: int, user_id: int) -> Notification:
        with self._uow_factory() as uow:
            notification = uow.notifications.mark_read(notification_id, user_id)
            if notification is None:
                raise _notification_not_found(notification_id)
        return notification


class MarkAllNotificationsReadUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> int:
        with self._uow_factory() as uow:
            return uow.notifications.mark_all_read(user_id)


class DeleteNotificationUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, notification_id: int, user_id: int) -> None:
        with self._uow_factory() as uow:
            if uow.notifications.delete(notification_id, user_id) is None:
                raise _notification_not_found(notification_id)


class CreateNotificationUseCase:
    """Admin: send one notification to one user."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: CreateNotificationCommand) -> Notification:
        with self._uow_factory() as uow:
            _require_users(uow, {command.user_id})
            notification = uow.notifications.add(_to_draft(command))
        logger.info("Notification created: id=%d", notification.id)
        return notification


class CreateBulkNotificationsUseCase:
    """Admin: send many notifications in one transaction."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, commands: list[CreateNotificationCommand]) -> list[Notification]:
        if not commands:
            raise ValidationError("At least one notification is required")
        with self._uow_factory() as uow:
            _require_users(uow, {command.user_id for command in commands})
            created = uow.notifications.add_many([_to_draft(c) for c in commands])
        logger.info("Bulk notifications created: count=%d", len(created))
        return created
