"""
Trade execution steps shared by direct trades and order execution.

Both functions run inside a caller-owned unit of work and never commit.
Rows are locked in a fixed order (product, then user, then portfolio
row) so concurrent trades cannot deadlock each other.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from papertrade.domain.accounts.errors import UserNotFoundError
from papertrade.domain.errors import ValidationError
from papertrade.domain.trading.entities import (
    PortfolioPosition,
    Product,
    Transaction,
    TransactionType,
    trade_total,
)
from papertrade.domain.trading.errors import (
    InsufficientFundsError,
    InsufficientHoldingsError,
    ProductNotFoundError,
    TradeTooSmallError,
)
from papertrade.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutedTrade:
    transaction: Transaction
    product: Product
    new_wallet_balance: Decimal


def _require_positive(units: Decimal) -> None:
    if units <= 0:
        raise ValidationError("Units must be greater than 0")


def _billable_total(units: Decimal, price: Decimal) -> Decimal:
    total = trade_total(units, price)
    if total <= 0:
        raise TradeTooSmallError(units=str(units), price=str(price))
    return total


def execute_buy(
    uow: UnitOfWork, user_id: int, product_id: int, units: Decimal
) -> ExecutedTrade:
    """Buy `units` of a product at its current price.

    Raises:
        ValidationError: If units is not positive.
        ProductNotFoundError: If the product does not exist.
        UserNotFoundError: If the user does not exist.
        TradeTooSmallError: If the total rounds to less than one cent.
        InsufficientFundsError: If the wallet cannot cover the total.
    """
    _require_positive(units)

    product = uow.products.get_by_id(product_id, lock=True)
    if product is None:
        raise ProductNotFoundError(product_id)

    user = uow.users.get_by_id(user_id, for_update=True)
    if user is None:
        raise UserNotFoundError(user_id)

    total = _billable_total(units, product.price)
    if user.wallet_balance < total:
        raise InsufficientFundsError(required=str(total), available=str(user.wallet_balance))

    transaction = uow.transactions.add(
        user_id=user_id,
        product_id=product_id,
        type=TransactionType.BUY,
        units=units,
        price_per_unit=product.price,
        total_amount=total,
    )

    if not uow.users.debit_wallet(user_id, total):
        # The row lock makes this unreachable unless the balance moved underneath us
        raise InsufficientFundsError(required=str(total), available=str(user.wallet_balance))

    position = uow.portfolio.get(user_id, product_id, for_update=True)
    if position is None:
        position = PortfolioPosition.opened(user_id, product_id, units, product.price)
    else:
        position = position.after_buy(units, product.price)
    uow.portfolio.save(position)

    logger.info(
        "Buy executed: user_id=%d, product_id=%d, units=%s, total=%s",
        user_id,
        product_id,
        units,
        total,
    )
    return ExecutedTrade(
        transaction=transaction,
        product=product,
        new_wallet_balance=user.wallet_balance - total,
    )


def execute_sell(
    uow: UnitOfWork, user_id: int, product_id: int, units: Decimal
) -> ExecutedTrade:
    """Sell `units` of a held product at its current price.

    The position keeps its average price; a fully sold position stays
    as a row with quantity 0.

    Raises:
        ValidationError: If units is not positive.
        ProductNotFoundError: If the product does not exist.
        UserNotFoundError: If the user does not exist.
        InsufficientHoldingsError: If fewer than `units` are held.
        TradeTooSmallError: If the total rounds to less than one cent.
    """
    _require_positive(units)

    product = uow.products.get_by_id(product_id, lock=True)
    if product is None:
        raise ProductNotFoundError(product_id)

    user = uow.users.get_by_id(user_id, for_update=True)
    if user is None:
        raise UserNotFoundError(user_id)

    position = uow.portfolio.get(user_id, product_id, for_update=True)
    if position is None:
        raise InsufficientHoldingsError(requested=str(units), held="0")
    position = position.after_sell(units)

    total = _billable_total(units, product.price)
    transaction = uow.transactions.add(
        user_id=user_id,
        product_id=product_id,
        type=TransactionType.SELL,
        units=units,
        price_per_unit=product.price,
        total_amount=total,
    )
    uow.users.credit_wallet(user_id, total)
    uow.portfolio.save(position)

    logger.info(
        "Sell executed: user_id=%d, product_id=%d, units=%s, total=%s",
        user_id,
        product_id,
        units,
        total,
    )
    return ExecutedTrade(
        transaction=transaction,
        product=product,
        new_wallet_balance=user.wallet_balance + total,
    )
