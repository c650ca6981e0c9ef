"""
Tests for infrastructure adapters.

Redis is replaced by a MagicMock client; everything else runs for real.
"""

import json
import time
import typing
from decimal import Decimal
from unittest.mock import MagicMock

import jwt
import pytest
import redis

from papertrade import cli
from papertrade.domain.accounts.entities import (
    ActivityDay,
    AuditAction,
    AuditEntry,
    AuditFilter,
    Role,
    User,
)
from papertrade.domain.accounts.errors import InvalidTokenError, TokenExpiredError
from papertrade.domain.accounts.ports import AuditLogRepository
from papertrade.domain.trading.entities import Product
from papertrade.infrastructure.accounts.audit_log_repository import SqlAuditLogRepository
from papertrade.infrastructure.accounts.password_hasher import BcryptPasswordHasher
from papertrade.infrastructure.accounts.token_service import JwtTokenService
from papertrade.infrastructure.database.seed import DEMO_PASSWORD, seed_demo_data
from papertrade.infrastructure.trading.product_cache import (
    PRODUCTS_CACHE_KEY,
    RedisProductCache,
)

SECRET = "another-test-secret-that-is-long-enough"


def _user(role: Role = Role.USER) -> User:
    return User(
        id=7,
        name="Token Holder",
        email="holder@example.com",
        password_hash="x",
        role=role,
        wallet_balance=Decimal("0.00"),
    )


class TestRedisProductCache:
    """Tests for the Redis-backed product list cache."""

    def test_set_then_get_round_trips_products(self) -> None:
        client = MagicMock()
        cache = RedisProductCache(client, ttl_seconds=30)
        product = Product(
            id=1,
            name="Acme",
            category="Stocks",
            price=Decimal("12.34"),
            pe_ratio=Decimal("15.20"),
            volume=10,
        )

        cache.set_products([product])
        key, ttl, payload = client.setex.call_args.args
        client.get.return_value = payload

        assert (key, ttl) == (PRODUCTS_CACHE_KEY, 30)
        assert json.loads(payload)[0]["price"] == "12.34"
        assert cache.get_products() == [product]

    def test_miss_returns_none(self) -> None:
        client = MagicMock()
        client.get.return_value = None

        assert RedisProductCache(client).get_products() is None

    def test_redis_outage_is_a_miss(self) -> None:
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        client.delete.side_effect = redis.ConnectionError("down")
        cache = RedisProductCache(client)

        assert cache.get_products() is None
        cache.invalidate()

    def test_malformed_entry_is_discarded(self) -> None:
        client = MagicMock()
        client.get.return_value = b"not json"

        assert RedisProductCache(client).get_products() is None

    def test_invalidate_deletes_key(self) -> None:
        client = MagicMock()

        RedisProductCache(client).invalidate()

        client.delete.assert_called_once_with(PRODUCTS_CACHE_KEY)


class TestSqlAuditLogRepository:
    """Tests for filtering audit entries."""

    def test_return_annotations_resolve(self) -> None:
        for cls in (AuditLogRepository, SqlAuditLogRepository):
            assert typing.get_type_hints(cls.search)["return"] == list[AuditEntry]
            assert typing.get_type_hints(cls.activity_for_user)["return"] == list[ActivityDay]

    def test_search_filters_by_user_and_action(self, uow_factory, make_user) -> None:
        alice = make_user()
        bob = make_user()
        with uow_factory() as uow:
            uow.audit_logs.add(action=AuditAction.LOGIN, resource="auth", user_id=alice.id)
            uow.audit_logs.add(action=AuditAction.CREATE, resource="order", user_id=alice.id)
            uow.audit_logs.add(action=AuditAction.LOGIN, resource="auth", user_id=bob.id)

        with uow_factory() as uow:
            logins = uow.audit_logs.search(AuditFilter(action=AuditAction.LOGIN))
            alice_orders = uow.audit_logs.search(
                AuditFilter(user_id=alice.id, resource="order")
            )
            first_page = uow.audit_logs.search(AuditFilter(), limit=2)

        assert {entry.user_id for entry in logins} == {alice.id, bob.id}
        assert [entry.action for entry in alice_orders] == [AuditAction.CREATE]
        assert len(first_page) == 2

class TestJwtTokenService:
    """Tests for issuing and verifying access tokens."""

    def test_round_trip_carries_id_and_role(self) -> None:
        service = JwtTokenService(secret=SECRET)

        claims = service.decode(service.issue(_user(Role.ADMIN)))

        assert claims.user_id == 7
        assert claims.role == "admin"

    def test_remember_me_extends_lifetime(self) -> None:
        service = JwtTokenService(secret=SECRET, expire_minutes=60, remember_me_days=30)

        short = jwt.decode(service.issue(_user()), SECRET, algorithms=["HS256"])
        long = jwt.decode(service.issue(_user(), remember_me=True), SECRET, algorithms=["HS256"])

        assert short["exp"] - short["iat"] == 60 * 60
        assert long["exp"] - long["iat"] == 30 * 24 * 60 * 60

    def test_expired_token(self) -> None:
        expired = jwt.encode(
            {"sub": "7", "exp": int(time.time()) - 10}, SECRET, algorithm="HS256"
        )

        with pytest.raises(TokenExpiredError):
            JwtTokenService(secret=SECRET).decode(expired)

    def test_token_signed_with_other_secret(self) -> None:
        forged = JwtTokenService(secret="a-completely-different-secret-value").issue(_user())

        with pytest.raises(InvalidTokenError):
            JwtTokenService(secret=SECRET).decode(forged)

    def test_non_numeric_subject(self) -> None:
        token = jwt.encode(
            {"sub": "abc", "exp": int(time.time()) + 60}, SECRET, algorithm="HS256"
        )

        with pytest.raises(InvalidTokenError):
            JwtTokenService(secret=SECRET).decode(token)


class TestBcryptPasswordHasher:
    """Tests for password hashing."""

    def test_hash_and_verify(self) -> None:
        hasher = BcryptPasswordHasher(rounds=4)
        hashed = hasher.hash("s3cret!")

        assert hashed != "s3cret!"
        assert hasher.verify("s3cret!", hashed)
        assert not hasher.verify("wrong", hashed)

    def test_malformed_hash_does_not_verify(self) -> None:
        assert not BcryptPasswordHasher(rounds=4).verify("anything", "not-a-bcrypt-hash")


class TestSeed:
    """Tests for the demo data loader and CLI."""

    def test_seed_is_idempotent(self, engine, uow_factory, hasher) -> None:
        first = seed_demo_data(engine, hasher)
        second = seed_demo_data(engine, hasher)

        assert (first.users_created, first.products_created) == (3, 7)
        assert (second.users_created, second.products_created) == (0, 0)
        with uow_factory() as uow:
            admin = uow.users.get_by_email("admin@papertrade.dev")
        assert admin.role is Role.ADMIN
        assert hasher.verify(DEMO_PASSWORD, admin.password_hash)

    def test_cli_seed_uses_configured_database(self, monkeypatch, settings, uow_factory) -> None:
        monkeypatch.setattr(cli, "settings", settings)

        cli.main(["seed"])

        with uow_factory() as uow:
            assert uow.products.count() == 7

    def test_cli_without_command_exits(self) -> None:
        with pytest.raises(SystemExit):
            cli.main([])
