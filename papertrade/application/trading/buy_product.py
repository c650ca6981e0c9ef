"""
Use case: Buy units of a product with the virtual wallet.

Input: TradeCommand (user_id, product_id, units)
Output: TradeResult (transaction, new wallet balance)
Side effects: Inserts a buy transaction, debits the wallet, opens or
    updates the portfolio position, writes a notification and an audit
    entry. All in one database transaction.
Failure cases: ProductNotFoundError, UserNotFoundError,
    InsufficientFundsError, ValidationError. Nothing is written on failure.
"""

import logging

from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.application.trading.dtos import TradeCommand, TradeResult
from papertrade.application.trading.trade_execution import execute_buy
from papertrade.domain.accounts.entities import (
    AuditAction,
    NotificationDraft,
    NotificationType,
)
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class BuyProductUseCase:
    """Orchestrates an atomic purchase."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        """Initialize the use case.

        Args:
            uow_factory: Opens one database transaction per call.
        """
        self._uow_factory = uow_factory

    def execute(
        self, command: TradeCommand, context: RequestContext = ANONYMOUS
    ) -> TradeResult:
        """Run the purchase.

        Args:
            command: Who buys what and how many units.
            context: Client details for the audit trail.

        Returns:
            The ledger entry and the wallet balance after the debit.
        """
        logger.info(
            "Purchase requested: user_id=%d, product_id=%d, units=%s",
            command.user_id,
            command.product_id,
            command.units,
        )

        with self._uow_factory() as uow:
            trade = execute_buy(uow, command.user_id, command.product_id, command.units)
            transaction = trade.transaction

            uow.notifications.add(
                NotificationDraft(
                    user_id=command.user_id,
                    type=NotificationType.TRANSACTION,
                    title="Purchase completed",
                    message=(
                        f"Bought {transaction.units} units of {trade.product.name} "
                        f"for {transaction.total_amount}"
                    ),
                    data={
                        "transaction_id": transaction.id,
                        "product_id": trade.product.id,
                        "total_amount": str(transaction.total_amount),
                    },
                )
            )
            record_audit(
                uow,
                context,
                action=AuditAction.CREATE,
                resource="transaction",
                user_id=command.user_id,
                resource_id=transaction.id,
                details={
                    "type": "buy",
                    "product_id": trade.product.id,
                    "units": str(transaction.units),
                    "total_amount": str(transaction.total_amount),
                },
            )

        return TradeResult(
            transaction=transaction, new_wallet_balance=trade.new_wallet_balance
        )
