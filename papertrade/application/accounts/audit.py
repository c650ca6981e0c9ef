"""
Use cases: Query and prune the audit trail.

Side effects: Only CleanAuditLogsUseCase writes (deletes old entries).
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from papertrade.domain.accounts.entities import (
    ActivityDay,
    AuditEntry,
    AuditFilter,
    AuditStats,
)
from papertrade.domain.errors import ValidationError
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.shared.clock import utcnow

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 90


class ListAuditLogsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self, filters: AuditFilter, limit: int = 50, offset: int = 0
    ) -> list[AuditEntry]:
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.start_date > filters.end_date
        ):
            raise ValidationError("start_date must not be after end_date")
        with self._uow_factory() as uow:
            return uow.audit_logs.search(filters, limit=limit, offset=offset)


class GetAuditStatsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> AuditStats:
        with self._uow_factory() as uow:
            return uow.audit_logs.stats(start_date=start_date, end_date=end_date)


class GetUserActivityUseCase:
    """Per-day activity counts for one user, most recent day first."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, days: int = 30) -> list[ActivityDay]:
        with self._uow_factory() as uow:
            return uow.audit_logs.activity_for_user(user_id, limit=days)


class GetResourceActivityUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, resource: str, resource_id: str, limit: int = 50) -> list[AuditEntry]:
        with self._uow_factory() as uow:
            return uow.audit_logs.for_resource(resource, resource_id, limit=limit)


class CleanAuditLogsUseCase:
    """Admin: delete entries older than the retention window."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, days_to_keep: int = DEFAULT_RETENTION_DAYS) -> int:
        if days_to_keep < 1:
            raise ValidationError("days_to_keep must be at least 1")
        cutoff = utcnow() - timedelta(days=days_to_keep)
        with self._uow_factory() as uow:
            deleted = uow.audit_logs.delete_older_than(cutoff)
        logger.info("Audit cleanup: deleted=%d, days_to_keep=%d", deleted, days_to_keep)
        return deleted
