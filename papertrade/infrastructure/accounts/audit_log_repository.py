"""
Adapter: Audit log repository.

Implements AuditLogRepository port on SQLAlchemy Core.
Audit rows are written inside the same transaction as the change they record.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import case, delete, distinct, func, select
from sqlalchemy.engine import Connection

from papertrade.domain.accounts.entities import (
    ActivityDay,
    AuditAction,
    AuditEntry,
    AuditFilter,
    AuditStats,
)
from papertrade.domain.accounts.ports import AuditLogRepository
from papertrade.infrastructure.database.tables import audit_logs, users

logger = logging.getLogger(__name__)


def _row_to_entry(row: Any) -> AuditEntry:
    data = row._mapping
    return AuditEntry(
        id=data["id"],
        action=AuditAction(data["action"]),
        resource=data["resource"],
        user_id=data["user_id"],
        resource_id=data["resource_id"],
        details=data["details"],
        ip_address=data["ip_address"],
        user_agent=data["user_agent"],
        created_at=data["created_at"],
        user_email=data.get("user_email"),
        user_name=data.get("user_name"),
    )


def _action_count(action: AuditAction) -> Any:
    return func.coalesce(func.sum(case((audit_logs.c.action == action.value, 1), else_=0)), 0)


def _as_date(value: Any) -> date:
    # SQLite returns DATE() as text
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


class SqlAuditLogRepository(AuditLogRepository):
    """Reads and writes the audit_logs table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def _select_with_user(self):
        return select(
            audit_logs,
            users.c.email.label("user_email"),
            users.c.name.label("user_name"),
        ).select_from(audit_logs.outerjoin(users, users.c.id == audit_logs.c.user_id))

    def add(
        self,
        *,
        action: AuditAction,
        resource: str,
        user_id: Optional[int] = None,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditEntry:
        result = self._conn.execute(
            audit_logs.insert().values(
                action=action.value,
                resource=resource,
                user_id=user_id,
                resource_id=resource_id,
                details=details,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        entry_id = result.inserted_primary_key[0]
        row = self._conn.execute(
            self._select_with_user().where(audit_logs.c.id == entry_id)
        ).one()
        return _row_to_entry(row)

    def search(
        self, filters: AuditFilter, limit: int = 50, offset: int = 0
    ) -> list[AuditEntry]:
        query = self._select_with_user()
        if filters.user_id is not None:
            query = query.where(audit_logs.c.user_id == filters.user_id)
        if filters.action is not None:
            query = query.where(audit_logs.c.action == filters.action.value)
        if filters.resource:
            query = query.where(audit_logs.c.resource == filters.resource)
        if filters.start_date is not None:
            query = query.where(audit_logs.c.created_at >= filters.start_date)
        if filters.end_date is not None:
            query = query.where(audit_logs.c.created_at <= filters.end_date)
        query = (
            query.order_by(audit_logs.c.created_at.desc(), audit_logs.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [_row_to_entry(row) for row in self._conn.execute(query)]

    def stats(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> AuditStats:
        conditions = []
        if start_date is not None:
            conditions.append(audit_logs.c.created_at >= start_date)
        if end_date is not None:
            conditions.append(audit_logs.c.created_at <= end_date)

        totals = self._conn.execute(
            select(
                func.count().label("total_logs"),
                func.count(distinct(audit_logs.c.user_id)).label("unique_users"),
            ).where(*conditions)
        ).one()._mapping

        per_action = self._conn.execute(
            select(audit_logs.c.action, func.count().label("total"))
            .where(*conditions)
            .group_by(audit_logs.c.action)
        )
        action_counts = {action.value: 0 for action in AuditAction}
        for row in per_action:
            action_counts[row.action] = int(row.total)

        return AuditStats(
            total_logs=int(totals["total_logs"]),
            unique_users=int(totals["unique_users"]),
            action_counts=action_counts,
        )

    def activity_for_user(self, user_id: int, limit: int = 30) -> list[ActivityDay]:
        day = func.date(audit_logs.c.created_at)
        query = (
            select(
                day.label("day"),
                func.count().label("activity_count"),
                _action_count(AuditAction.LOGIN).label("login_count"),
                _action_count(AuditAction.CREATE).label("create_count"),
                _action_count(AuditAction.UPDATE).label("update_count"),
                _action_count(AuditAction.DELETE).label("delete_count"),
            )
            .where(audit_logs.c.user_id == user_id)
            .group_by(day)
            .order_by(day.desc())
            .limit(limit)
        )
        return [
            ActivityDay(
                date=_as_date(row.day),
                activity_count=int(row.activity_count),
                login_count=int(row.login_count),
                create_count=int(row.create_count),
                update_count=int(row.update_count),
                delete_count=int(row.delete_count),
            )
            for row in self._conn.execute(query)
        ]

    def for_resource(
        self, resource: str, resource_id: str, limit: int = 50
    ) -> list[AuditEntry]:
        query = (
            self._select_with_user()
            .where(audit_logs.c.resource == resource)
            .where(audit_logs.c.resource_id == resource_id)
            .order_by(audit_logs.c.created_at.desc(), audit_logs.c.id.desc())
            .limit(limit)
        )
        return [_row_to_entry(row) for row in self._conn.execute(query)]

    def delete_older_than(self, cutoff: datetime) -> int:
        result = self._conn.execute(delete(audit_logs).where(audit_logs.c.created_at < cutoff))
        logger.info("Deleted %d audit entries older than %s.", result.rowcount, cutoff)
        return result.rowcount
