"""
Unit of Work port.

A unit of work is one database transaction. Every repository exposed
by an open unit of work shares that transaction, so multi-step flows
such as a purchase either commit entirely or leave no trace.

Usage:
    with uow_factory() as uow:
        product = uow.products.get_by_id(product_id, lock=True)
        ...
    # committed here; any exception inside the block rolls back
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from papertrade.domain.accounts.ports import (
    AuditLogRepository,
    KycRepository,
    NotificationRepository,
    UserRepository,
)
from papertrade.domain.trading.ports import (
    AlertRepository,
    OrderRepository,
    PortfolioRepository,
    ProductRepository,
    TransactionRepository,
    WatchlistRepository,
)


class UnitOfWork(ABC):
    """Transactional scope exposing every repository."""

    users: UserRepository
    kyc: KycRepository
    notifications: NotificationRepository
    audit_logs: AuditLogRepository
    products: ProductRepository
    transactions: TransactionRepository
    portfolio: PortfolioRepository
    watchlist: WatchlistRepository
    orders: OrderRepository
    alerts: AlertRepository

    @abstractmethod
    def __enter__(self) -> "UnitOfWork":
        raise NotImplementedError

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        """Commit when the block succeeded, roll back otherwise."""
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], UnitOfWork]
