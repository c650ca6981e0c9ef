"""
Adapter: SQL unit of work.

Implements the UnitOfWork port. Opens one connection and one
transaction on enter, binds every repository to it, and commits on a
clean exit or rolls back when the block raises.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Connection, Engine

from papertrade.domain.unit_of_work import UnitOfWork
from papertrade.infrastructure.accounts.audit_log_repository import SqlAuditLogRepository
from papertrade.infrastructure.accounts.kyc_repository import SqlKycRepository
from papertrade.infrastructure.accounts.notification_repository import (
    SqlNotificationRepository,
)
from papertrade.infrastructure.accounts.user_repository import SqlUserRepository
from papertrade.infrastructure.trading.alert_repository import SqlAlertRepository
from papertrade.infrastructure.trading.order_repository import SqlOrderRepository
from papertrade.infrastructure.trading.portfolio_repository import SqlPortfolioRepository
from papertrade.infrastructure.trading.product_repository import SqlProductRepository
from papertrade.infrastructure.trading.transaction_repository import (
    SqlTransactionRepository,
)
from papertrade.infrastructure.trading.watchlist_repository import SqlWatchlistRepository

logger = logging.getLogger(__name__)


class SqlUnitOfWork(UnitOfWork):
    """One database transaction shared by every repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._connection: Optional[Connection] = None

    def __enter__(self) -> "SqlUnitOfWork":
        connection = self._engine.connect()
        try:
            connection.begin()
        except Exception:
            connection.close()
            raise
        self._connection = connection

        self.users = SqlUserRepository(connection)
        self.kyc = SqlKycRepository(connection)
        self.notifications = SqlNotificationRepository(connection)
        self.audit_logs = SqlAuditLogRepository(connection)
        self.products = SqlProductRepository(connection)
        self.transactions = SqlTransactionRepository(connection)
        self.portfolio = SqlPortfolioRepository(connection)
        self.watchlist = SqlWatchlistRepository(connection)
        self.orders = SqlOrderRepository(connection)
        self.alerts = SqlAlertRepository(connection)
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        connection = self._connection
        self._connection = None
        try:
            if exc_type is None:
                connection.commit()
            else:
                logger.debug("Rolling back unit of work: %s", exc_type.__name__)
                connection.rollback()
        finally:
            connection.close()
        return None
