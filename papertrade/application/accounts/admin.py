"""
Use cases: Administrator views and wallet adjustments.

Input: user ids and wallet amounts
Output: dashboard aggregates, user listings and details
Side effects: AdjustWalletUseCase changes a balance and writes an audit entry.
Failure cases: UserNotFoundError, ValidationError for a zero amount,
    NegativeWalletBalanceError when an adjustment would overdraw.
"""

import logging
from decimal import Decimal

from papertrade.application.accounts.dtos import Dashboard, DashboardStats, UserDetail
from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.domain.accounts.entities import AuditAction, User
from papertrade.domain.accounts.errors import NegativeWalletBalanceError, UserNotFoundError
from papertrade.domain.errors import ValidationError
from papertrade.domain.trading.entities import round_money
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 10
TOP_PRODUCTS = 5


class GetDashboardUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> Dashboard:
        with self._uow_factory() as uow:
            stats = DashboardStats(
                total_users=uow.users.count(),
                total_products=uow.products.count(),
                total_transactions=uow.transactions.count(),
                total_volume=uow.transactions.total_buy_volume(),
            )
            recent = uow.transactions.list_all(limit=RECENT_TRANSACTIONS)
            top = uow.transactions.top_products(limit=TOP_PRODUCTS)
        return Dashboard(stats=stats, recent_transactions=recent, top_products=top)


class ListUsersUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> list[User]:
        with self._uow_factory() as uow:
            return uow.users.list_all()


class GetUserDetailUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> UserDetail:
        with self._uow_factory() as uow:
            user = uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            transactions = uow.transactions.list_for_user(user_id)
            holdings = uow.portfolio.holdings_for_user(user_id)
        return UserDetail(user=user, transactions=transactions, holdings=holdings)


class AdjustWalletUseCase:
    """Add (or with a negative amount, remove) virtual funds."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self,
        user_id: int,
        amount: Decimal,
        admin_id: int,
        context: RequestContext = ANONYMOUS,
    ) -> User:
        amount = round_money(amount)
        if amount == 0:
            raise ValidationError("Amount must not be zero")

        with self._uow_factory() as uow:
            user = uow.users.get_by_id(user_id, for_update=True)
            if user is None:
                raise UserNotFoundError(user_id)

            if amount > 0:
                uow.users.credit_wallet(user_id, amount)
            elif not uow.users.debit_wallet(user_id, -amount):
                raise NegativeWalletBalanceError(
                    balance=str(user.wallet_balance), amount=str(amount)
                )

            record_audit(
                uow,
                context,
                action=AuditAction.UPDATE,
                resource="wallet",
                user_id=admin_id,
                resource_id=user_id,
                details={
                    "amount": str(amount),
                    "previous_balance": str(user.wallet_balance),
                },
            )
            updated = uow.users.get_by_id(user_id)

        logger.info("Wallet adjusted: user_id=%d, amount=%s", user_id, amount)
        return updated
