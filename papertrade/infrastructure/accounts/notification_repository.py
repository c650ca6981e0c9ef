"""
Adapter: Notification repository.

Implements NotificationRepository port on SQLAlchemy Core.
Every mutating query is scoped to the owning user.
"""

from typing import Any, Optional

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.engine import Connection

from papertrade.domain.accounts.entities import (
    Notification,
    NotificationDraft,
    NotificationStats,
    NotificationType,
)
from papertrade.domain.accounts.ports import NotificationRepository
from papertrade.infrastructure.database.tables import notifications
from papertrade.shared.clock import utcnow


def _row_to_notification(row: Any) -> Notification:
    data = row._mapping
    return Notification(
        id=data["id"],
        user_id=data["user_id"],
        type=NotificationType(data["type"]),
        title=data["title"],
        message=data["message"],
        is_read=bool(data["is_read"]),
        data=data["data"],
        read_at=data["read_at"],
        created_at=data["created_at"],
    )


def _count_where(condition) -> Any:
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class SqlNotificationRepository(NotificationRepository):
    """Reads and writes the notifications table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def _get(self, notification_id: int) -> Optional[Notification]:
        row = self._conn.execute(
            select(notifications).where(notifications.c.id == notification_id)
        ).first()
        return _row_to_notification(row) if row else None

    def add(self, draft: NotificationDraft) -> Notification:
        result = self._conn.execute(
            notifications.insert().values(
                user_id=draft.user_id,
                type=draft.type.value,
                title=draft.title,
                message=draft.message,
                data=draft.data,
                is_read=False,
            )
        )
        return self._get(result.inserted_primary_key[0])

    def add_many(self, drafts: list[NotificationDraft]) -> list[Notification]:
        return [self.add(draft) for draft in drafts]

    def list_for_user(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> list[Notification]:
        query = (
            select(notifications)
            .where(notifications.c.user_id == user_id)
            .order_by(notifications.c.created_at.desc(), notifications.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [_row_to_notification(row) for row in self._conn.execute(query)]

    def unread_count(self, user_id: int) -> int:
        query = (
            select(func.count())
            .select_from(notifications)
            .where(notifications.c.user_id == user_id)
            .where(notifications.c.is_read.is_(False))
        )
        return self._conn.execute(query).scalar_one()

    def stats(self, user_id: int) -> NotificationStats:
        type_column = notifications.c.type
        query = select(
            func.count().label("total"),
            _count_where(notifications.c.is_read.is_(False)).label("unread"),
            _count_where(type_column == NotificationType.ORDER.value).label("order"),
            _count_where(type_column == NotificationType.ALERT.value).label("alert"),
            _count_where(type_column == NotificationType.SYSTEM.value).label("system"),
            _count_where(type_column == NotificationType.TRANSACTION.value).label(
                "transaction"
            ),
        ).where(notifications.c.user_id == user_id)
        row = self._conn.execute(query).one()._mapping
        return NotificationStats(
            total_notifications=int(row["total"]),
            unread_count=int(row["unread"]),
            order_notifications=int(row["order"]),
            alert_notifications=int(row["alert"]),
            system_notifications=int(row["system"]),
            transaction_notifications=int(row["transaction"]),
        )

    def mark_read(self, notification_id: int, user_id: int) -> Optional[Notification]:
        result = self._conn.execute(
            update(notifications)
            .where(notifications.c.id == notification_id)
            .where(notifications.c.user_id == user_id)
            .values(is_read=True, read_at=func.coalesce(notifications.c.read_at, utcnow()))
        )
        if result.rowcount == 0:
            return None
        return self._get(notification_id)

    def mark_all_read(self, user_id: int) -> int:
        result = self._conn.execute(
            update(notifications)
            .where(notifications.c.user_id == user_id)
            .where(notifications.c.is_read.is_(False))
            .values(is_read=True, read_at=utcnow())
        )
        return result.rowcount

    def delete(self, notification_id: int, user_id: int) -> Optional[Notification]:
        existing = self._get(notification_id)
        if existing is None or existing.user_id != user_id:
            return None
        self._conn.execute(
            delete(notifications).where(notifications.c.id == notification_id)
        )
        return existing
