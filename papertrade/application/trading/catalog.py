"""
Use cases: Browse and maintain the product catalog.

Reads of the full list go through the product-list cache (cache-aside).
Writes invalidate the cache after their transaction commits.
"""

import logging
from decimal import Decimal
from typing import Optional

from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.application.trading.dtos import CreateProductCommand, ProductDetail
from papertrade.domain.accounts.entities import AuditAction
from papertrade.domain.errors import ValidationError
from papertrade.domain.trading.entities import Product
from papertrade.domain.trading.errors import ProductNotFoundError
from papertrade.domain.trading.ports import ProductCatalogCache
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


class ListProductsUseCase:
    """Return every product, served from cache when possible."""

    def __init__(self, uow_factory: UnitOfWorkFactory, cache: ProductCatalogCache) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    def execute(self) -> list[Product]:
        cached = self._cache.get_products()
        if cached is not None:
            logger.debug("Product list served from cache (%d items).", len(cached))
            return cached

        with self._uow_factory() as uow:
            products = uow.products.list_all()
        self._cache.set_products(products)
        return products


class SearchProductsUseCase:
    """Case-insensitive match on product name or category."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, term: Optional[str]) -> list[Product]:
        """Search the catalog.

        Raises:
            ValidationError: If the trimmed term is shorter than two characters.
        """
        term = (term or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise ValidationError("Search query must be at least 2 characters long")
        with self._uow_factory() as uow:
            return uow.products.search(term)


class ListProductsByCategoryUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, category: str) -> list[Product]:
        with self._uow_factory() as uow:
            return uow.products.list_by_category(category)


class GetProductUseCase:
    """Return one product and, for a signed-in caller, whether it is watched."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, product_id: int, viewer_id: Optional[int] = None) -> ProductDetail:
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            is_watched = None
            if viewer_id is not None:
                is_watched = uow.watchlist.contains(viewer_id, product_id)
        return ProductDetail(product=product, is_watched=is_watched)


class CreateProductUseCase:
    """Admin: add a product to the catalog."""

    def __init__(self, uow_factory: UnitOfWorkFactory, cache: ProductCatalogCache) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    def execute(
        self,
        command: CreateProductCommand,
        admin_id: int,
        context: RequestContext = ANONYMOUS,
    ) -> Product:
        """Create the product.

        Raises:
            DuplicateProductError: If the name is already used.
        """
        with self._uow_factory() as uow:
            product = uow.products.add(
                name=command.name,
                category=command.category,
                price=command.price,
                description=command.description,
                pe_ratio=command.pe_ratio,
                market_cap=command.market_cap,
                volume=command.volume,
            )
            record_audit(
                uow,
                context,
                action=AuditAction.CREATE,
                resource="product",
                user_id=admin_id,
                resource_id=product.id,
                details={"name": product.name, "price": str(product.price)},
            )
        self._cache.invalidate()
        logger.info("Product created: id=%d, name=%s", product.id, product.name)
        return product


class UpdateProductPriceUseCase:
    """Admin: change a product's current price."""

    def __init__(self, uow_factory: UnitOfWorkFactory, cache: ProductCatalogCache) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    def execute(
        self,
        product_id: int,
        price: Decimal,
        admin_id: int,
        context: RequestContext = ANONYMOUS,
    ) -> Product:
        if price <= 0:
            raise ValidationError("Price must be greater than 0")
        with self._uow_factory() as uow:
            previous = uow.products.get_by_id(product_id, lock=True)
            if previous is None:
                raise ProductNotFoundError(product_id)
            product = uow.products.update_price(product_id, price)
            record_audit(
                uow,
                context,
                action=AuditAction.UPDATE,
                resource="product",
                user_id=admin_id,
                resource_id=product_id,
                details={"old_price": str(previous.price), "new_price": str(product.price)},
            )
        self._cache.invalidate()
        logger.info("Product price updated: id=%d, price=%s", product_id, price)
        return product
