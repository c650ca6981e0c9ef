"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting, CORS)
- Logging configuration
- Shared resources (database engine, Redis client) on `app.state`

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.engine import Engine

from papertrade.core.config import Settings
from papertrade.core.config import settings as default_settings
from papertrade.domain.trading.ports import ProductCatalogCache
from papertrade.infrastructure.accounts.password_hasher import BcryptPasswordHasher
from papertrade.infrastructure.accounts.token_service import JwtTokenService
from papertrade.infrastructure.database.engine import create_db_engine, create_schema
from papertrade.infrastructure.trading.product_cache import (
    NullProductCache,
    RedisProductCache,
)
from papertrade.interfaces.accounts.admin_router import router as admin_router
from papertrade.interfaces.accounts.audit_router import router as audit_router
from papertrade.interfaces.accounts.auth_router import router as auth_router
from papertrade.interfaces.accounts.kyc_router import router as kyc_router
from papertrade.interfaces.accounts.notifications_router import (
    router as notifications_router,
)
from papertrade.interfaces.health import router as health_router
from papertrade.interfaces.trading.alerts_router import router as alerts_router
from papertrade.interfaces.trading.analytics_router import router as analytics_router
from papertrade.interfaces.trading.orders_router import router as orders_router
from papertrade.interfaces.trading.portfolio_router import router as portfolio_router
from papertrade.interfaces.trading.products_router import router as products_router
from papertrade.interfaces.trading.transactions_router import (
    router as transactions_router,
)
from papertrade.shared.errors.handlers import register_error_handlers
from papertrade.shared.logging import configure_logging
from papertrade.shared.security.headers import SecurityHeadersMiddleware
from papertrade.shared.security.rate_limiting import (
    build_limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

API_ROUTERS = (
    auth_router,
    products_router,
    transactions_router,
    portfolio_router,
    orders_router,
    alerts_router,
    notifications_router,
    kyc_router,
    audit_router,
    admin_router,
    analytics_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open shared resources, then release them on shutdown.

    Builds the engine and Redis client when none were injected, so no
    connection pool exists before startup.
    """
    settings: Settings = app.state.settings
    if app.state.engine is None:
        app.state.engine = create_db_engine(settings)
    if app.state.redis is None and settings.redis_url:
        app.state.redis = redis.Redis.from_url(settings.redis_url)
    app.state.product_cache = _build_product_cache(settings, app.state.redis)

    if settings.auto_create_schema:
        create_schema(app.state.engine)
    logger.info("%s %s started.", settings.project_name, settings.version)

    yield

    if app.state.redis is not None:
        app.state.redis.close()
    app.state.engine.dispose()
    logger.info("%s stopped.", settings.project_name)


def _build_product_cache(
    settings: Settings, client: Optional[redis.Redis]
) -> ProductCatalogCache:
    if client is None:
        logger.info("REDIS_URL not set; product cache disabled.")
        return NullProductCache()
    return RedisProductCache(client, ttl_seconds=settings.product_cache_ttl_seconds)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    redis_client: Optional[redis.Redis] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Args:
        settings: Settings to run with. Defaults to the process settings.
        engine: Pre-built engine, mainly for tests. Built from settings at
            startup if omitted.
        redis_client: Pre-built Redis client. Built from `redis_url` at
            startup if omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or default_settings
    configure_logging(level=settings.log_level, sql_echo=settings.sql_echo)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Shared resources ---
    app.state.settings = settings
    app.state.engine = engine
    app.state.redis = redis_client
    app.state.product_cache = None
    app.state.password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = JwtTokenService.from_settings(settings)

    # --- Rate Limiting ---
    app.state.limiter = build_limiter(settings)
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Error Handlers ---
    register_error_handlers(app, debug=settings.debug)

    # --- Routers ---
    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)
    app.include_router(health_router)

    return app


app = create_app()
