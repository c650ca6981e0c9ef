"""
Use cases: Maintain a user's watchlist.

Adding is idempotent at the storage level: a pair is stored at most
once, and a second add is reported as AlreadyInWatchlistError.
"""

import logging

from papertrade.domain.errors import ResourceNotFoundError
from papertrade.domain.trading.entities import Product
from papertrade.domain.trading.errors import AlreadyInWatchlistError, ProductNotFoundError
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class GetWatchlistUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> list[Product]:
        with self._uow_factory() as uow:
            return uow.watchlist.list_products(user_id)


class AddToWatchlistUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, product_id: int) -> Product:
        """Watch a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
            AlreadyInWatchlistError: If the product is already watched.
        """
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if not uow.watchlist.add(user_id, product_id):
                raise AlreadyInWatchlistError(product_id)
        logger.info("Watchlist add: user_id=%d, product_id=%d", user_id, product_id)
        return product


class RemoveFromWatchlistUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, product_id: int) -> None:
        """Stop watching a product.

        Raises:
            ResourceNotFoundError: If the product was not being watched.
        """
        with self._uow_factory() as uow:
            if not uow.watchlist.remove(user_id, product_id):
                raise ResourceNotFoundError(
                    "Watchlist item", product_id, "Product not found in watchlist"
                )
        logger.info("Watchlist remove: user_id=%d, product_id=%d", user_id, product_id)
