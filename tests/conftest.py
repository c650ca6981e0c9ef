"""
Shared fixtures.

Every test gets its own SQLite database file under pytest's tmp_path,
so tests never share state. Rate limiting is off unless a test builds
its own app with it enabled.
"""

import itertools
from decimal import Decimal
from functools import partial
from typing import Callable, Iterator, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from papertrade.core.config import Settings
from papertrade.domain.accounts.entities import Role, User
from papertrade.domain.trading.entities import Product
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.infrastructure.accounts.password_hasher import BcryptPasswordHasher
from papertrade.infrastructure.accounts.token_service import JwtTokenService
from papertrade.infrastructure.database.engine import create_db_engine, create_schema
from papertrade.infrastructure.database.unit_of_work import SqlUnitOfWork
from papertrade.main import create_app

TEST_PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'papertrade.db'}",
        redis_url=None,
        rate_limit_enabled=False,
        bcrypt_rounds=4,
        jwt_secret="test-secret-key-that-is-long-enough-for-hs256",
        auto_create_schema=True,
        log_level="WARNING",
    )


@pytest.fixture
def engine(settings: Settings) -> Iterator[Engine]:
    engine = create_db_engine(settings)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine: Engine) -> UnitOfWorkFactory:
    return partial(SqlUnitOfWork, engine)


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def tokens(settings: Settings) -> JwtTokenService:
    return JwtTokenService.from_settings(settings)


@pytest.fixture
def make_user(
    uow_factory: UnitOfWorkFactory, hasher: BcryptPasswordHasher
) -> Callable[..., User]:
    counter = itertools.count(1)

    def _make(
        *,
        email: Optional[str] = None,
        role: Role = Role.USER,
        balance: Decimal = Decimal("100000.00"),
        password: str = TEST_PASSWORD,
        name: str = "Test User",
    ) -> User:
        with uow_factory() as uow:
            return uow.users.add(
                name=name,
                email=email or f"user{next(counter)}@example.com",
                password_hash=hasher.hash(password),
                role=role,
                wallet_balance=balance,
            )

    return _make


@pytest.fixture
def make_product(uow_factory: UnitOfWorkFactory) -> Callable[..., Product]:
    counter = itertools.count(1)

    def _make(
        *,
        name: Optional[str] = None,
        category: str = "Stocks",
        price: Decimal = Decimal("100.00"),
        volume: Optional[int] = 1000,
    ) -> Product:
        with uow_factory() as uow:
            return uow.products.add(
                name=name or f"Product {next(counter)}",
                category=category,
                price=price,
                volume=volume,
            )

    return _make


@pytest.fixture
def app(settings: Settings, engine: Engine) -> FastAPI:
    return create_app(settings, engine=engine)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(tokens: JwtTokenService) -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {tokens.issue(user)}"}

    return _headers


@pytest.fixture
def user(make_user) -> User:
    return make_user(email="trader@example.com")


@pytest.fixture
def admin(make_user) -> User:
    return make_user(email="admin@example.com", role=Role.ADMIN, name="Admin User")
