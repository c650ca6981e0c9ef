"""
Command-line entry point for database maintenance.

Usage:
    # Create every missing table
    python -m papertrade.cli init-db

    # Drop and recreate the schema
    python -m papertrade.cli init-db --drop

    # Load demo users and products
    python -m papertrade.cli seed
"""

import argparse
import logging
import sys
from typing import Optional

from papertrade.core.config import settings
from papertrade.infrastructure.accounts.password_hasher import BcryptPasswordHasher
from papertrade.infrastructure.database.engine import (
    create_db_engine,
    create_schema,
    drop_schema,
)
from papertrade.infrastructure.database.seed import DEMO_PASSWORD, seed_demo_data
from papertrade.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create the schema, optionally dropping it first."""
    engine = create_db_engine(settings)
    try:
        if args.drop:
            drop_schema(engine)
        create_schema(engine)
    finally:
        engine.dispose()


def cmd_seed(args: argparse.Namespace) -> None:
    """Create the schema if needed and load demo data."""
    engine = create_db_engine(settings)
    try:
        create_schema(engine)
        report = seed_demo_data(engine, BcryptPasswordHasher(rounds=settings.bcrypt_rounds))
    finally:
        engine.dispose()
    logger.info(
        "Created %d users and %d products. Demo password: %s",
        report.users_created,
        report.products_created,
        DEMO_PASSWORD,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="papertrade",
        description="PaperTrade database management",
    )
    sub = parser.add_subparsers(dest="command")

    p_init = sub.add_parser("init-db", help="Create database tables")
    p_init.add_argument(
        "--drop",
        action="store_true",
        help="Drop every table before recreating the schema",
    )
    p_init.set_defaults(func=cmd_init_db)

    p_seed = sub.add_parser("seed", help="Load demo users and products")
    p_seed.set_defaults(func=cmd_seed)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(level=settings.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
