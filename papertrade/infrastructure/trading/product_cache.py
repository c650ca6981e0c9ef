"""
Adapter: Product-list cache.

Implements ProductCatalogCache port. The full product list is cached
in Redis as JSON for a short TTL (cache-aside). A Redis outage is
logged and treated as a miss so reads fall through to the database.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import redis

from papertrade.domain.trading.entities import Product
from papertrade.domain.trading.ports import ProductCatalogCache

logger = logging.getLogger(__name__)

PRODUCTS_CACHE_KEY = "papertrade:products:all"


def _product_to_json(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "price": str(product.price),
        "description": product.description,
        "pe_ratio": str(product.pe_ratio) if product.pe_ratio is not None else None,
        "market_cap": product.market_cap,
        "volume": product.volume,
        "created_at": product.created_at.isoformat() if product.created_at else None,
    }


def _product_from_json(data: dict[str, Any]) -> Product:
    return Product(
        id=data["id"],
        name=data["name"],
        category=data["category"],
        price=Decimal(data["price"]),
        description=data.get("description"),
        pe_ratio=Decimal(data["pe_ratio"]) if data.get("pe_ratio") is not None else None,
        market_cap=data.get("market_cap"),
        volume=data.get("volume"),
        created_at=(
            datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None
        ),
    )


class RedisProductCache(ProductCatalogCache):
    """Caches the product list in Redis with a TTL."""

    def __init__(
        self,
        client: redis.Redis,
        ttl_seconds: int = 60,
        key: str = PRODUCTS_CACHE_KEY,
    ) -> None:
        self._client = client
        self._ttl = ttl_seconds
        self._key = key

    def get_products(self) -> Optional[list[Product]]:
        try:
            raw = self._client.get(self._key)
        except redis.RedisError:
            logger.warning("Product cache read failed; falling back to database.", exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return [_product_from_json(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed product cache entry.")
            return None

    def set_products(self, products: list[Product]) -> None:
        payload = json.dumps([_product_to_json(product) for product in products])
        try:
            self._client.setex(self._key, self._ttl, payload)
        except redis.RedisError:
            logger.warning("Product cache write failed.", exc_info=True)

    def invalidate(self) -> None:
        try:
            self._client.delete(self._key)
        except redis.RedisError:
            logger.warning("Product cache invalidation failed.", exc_info=True)


class NullProductCache(ProductCatalogCache):
    """Cache used when no Redis URL is configured. Always misses."""

    def get_products(self) -> Optional[list[Product]]:
        return None

    def set_products(self, products: list[Product]) -> None:
        return None

    def invalidate(self) -> None:
        return None
