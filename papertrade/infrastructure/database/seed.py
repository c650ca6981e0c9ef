"""
Demo data loader.

Creates an administrator, two regular users and a small product
catalog. Safe to run repeatedly: existing emails and product names
are skipped.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.engine import Engine

from papertrade.domain.accounts.entities import Role
from papertrade.domain.accounts.ports import PasswordHasher
from papertrade.domain.trading.errors import DuplicateProductError
from papertrade.infrastructure.database.unit_of_work import SqlUnitOfWork

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = (
    ("Admin User", "admin@papertrade.dev", Role.ADMIN, Decimal("1000000.00")),
    ("John Doe", "john@example.com", Role.USER, Decimal("100000.00")),
    ("Jane Smith", "jane@example.com", Role.USER, Decimal("150000.00")),
)


@dataclass(frozen=True)
class DemoProduct:
    name: str
    category: str
    price: Decimal
    description: str
    pe_ratio: Optional[Decimal]
    market_cap: int
    volume: int


DEMO_PRODUCTS = (
    DemoProduct(
        "Reliance Industries Ltd", "Stocks", Decimal("2450.75"),
        "Conglomerate with interests in petrochemicals, refining and telecom.",
        Decimal("18.50"), 16_500_000_000_000, 2_500_000,
    ),
    DemoProduct(
        "TCS (Tata Consultancy Services)", "Stocks", Decimal("3850.25"),
        "IT services, consulting and business solutions.",
        Decimal("25.80"), 14_000_000_000_000, 1_800_000,
    ),
    DemoProduct(
        "HDFC Bank Ltd", "Stocks", Decimal("1650.50"),
        "Private sector bank with retail and corporate banking.",
        Decimal("22.30"), 12_000_000_000_000, 3_200_000,
    ),
    DemoProduct(
        "Infosys Ltd", "Stocks", Decimal("1850.80"),
        "Digital services and consulting.",
        Decimal("28.20"), 7_800_000_000_000, 2_100_000,
    ),
    DemoProduct(
        "SBI Bluechip Fund", "Mutual Funds", Decimal("125.45"),
        "Large-cap equity fund focused on blue-chip companies.",
        None, 85_000_000_000, 150_000,
    ),
    DemoProduct(
        "Axis Long Term Equity Fund", "Mutual Funds", Decimal("89.75"),
        "Equity linked savings scheme with a three year lock-in.",
        None, 45_000_000_000, 95_000,
    ),
    DemoProduct(
        "ICICI Prudential Technology Fund", "Mutual Funds", Decimal("156.30"),
        "Sector fund investing in technology companies.",
        None, 32_000_000_000, 75_000,
    ),
)


@dataclass(frozen=True)
class SeedReport:
    users_created: int
    products_created: int


def seed_demo_data(engine: Engine, hasher: PasswordHasher) -> SeedReport:
    """Insert the demo users and products that do not exist yet.

    Args:
        engine: Engine of an initialized database.
        hasher: Hashes the shared demo password.

    Returns:
        How many users and products were created.
    """
    password_hash = hasher.hash(DEMO_PASSWORD)
    users_created = 0
    products_created = 0

    with SqlUnitOfWork(engine) as uow:
        for name, email, role, balance in DEMO_USERS:
            if uow.users.get_by_email(email) is not None:
                continue
            uow.users.add(
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                wallet_balance=balance,
            )
            users_created += 1

        for product in DEMO_PRODUCTS:
            try:
                uow.products.add(
                    name=product.name,
                    category=product.category,
                    price=product.price,
                    description=product.description,
                    pe_ratio=product.pe_ratio,
                    market_cap=product.market_cap,
                    volume=product.volume,
                )
            except DuplicateProductError:
                continue
            products_created += 1

    logger.info(
        "Seed complete: users_created=%d, products_created=%d",
        users_created,
        products_created,
    )
    return SeedReport(users_created=users_created, products_created=products_created)
