"""
Use cases: Read the transaction ledger.

Side effects: None (read-only queries).
"""

from typing import Optional

from papertrade.domain.trading.entities import Transaction, TransactionStats
from papertrade.domain.unit_of_work import UnitOfWorkFactory


class ListUserTransactionsUseCase:
    """A user's own ledger, newest first."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> list[Transaction]:
        with self._uow_factory() as uow:
            return uow.transactions.list_for_user(user_id)


class GetTransactionStatsUseCase:
    """Count, amount invested and net units for one user."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> TransactionStats:
        with self._uow_factory() as uow:
            return uow.transactions.stats_for_user(user_id)


class ListAllTransactionsUseCase:
    """Admin: the whole ledger with user names and emails."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, limit: Optional[int] = None) -> list[Transaction]:
        with self._uow_factory() as uow:
            return uow.transactions.list_all(limit=limit)
