"""
Use case: Sell held units of a product back into the wallet.

Input: TradeCommand (user_id, product_id, units)
Output: TradeResult (transaction, new wallet balance)
Side effects: Inserts a sell transaction, credits the wallet, reduces
    the portfolio position, writes a notification and an audit entry.
Failure cases: ProductNotFoundError, UserNotFoundError,
    InsufficientHoldingsError, ValidationError.
"""

import logging

from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.application.trading.dtos import TradeCommand, TradeResult
from papertrade.application.trading.trade_execution import execute_sell
from papertrade.domain.accounts.entities import (
    AuditAction,
    NotificationDraft,
    NotificationType,
)
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class SellProductUseCase:
    """Orchestrates an atomic sale."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self, command: TradeCommand, context: RequestContext = ANONYMOUS
    ) -> TradeResult:
        logger.info(
            "Sale requested: user_id=%d, product_id=%d, units=%s",
            command.user_id,
            command.product_id,
            command.units,
        )

        with self._uow_factory() as uow:
            trade = execute_sell(uow, command.user_id, command.product_id, command.units)
            transaction = trade.transaction

            uow.notifications.add(
                NotificationDraft(
                    user_id=command.user_id,
                    type=NotificationType.TRANSACTION,
                    title="Sale completed",
                    message=(
                        f"Sold {transaction.units} units of {trade.product.name} "
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
                    "type": "sell",
                    "product_id": trade.product.id,
                    "units": str(transaction.units),
                    "total_amount": str(transaction.total_amount),
                },
            )

        return TradeResult(
            transaction=transaction, new_wallet_balance=trade.new_wallet_balance
        )
