"""
Adapter: User repository.

Implements UserRepository port on SQLAlchemy Core.
Bound to the connection of one open unit of work.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from papertrade.domain.accounts.entities import Role, User
from papertrade.domain.accounts.errors import EmailAlreadyRegisteredError
from papertrade.domain.accounts.ports import UserRepository
from papertrade.infrastructure.database.tables import users

logger = logging.getLogger(__name__)


def row_to_user(row: Any) -> User:
    data = row._mapping
    return User(
        id=data["id"],
        name=data["name"],
        email=data["email"],
        password_hash=data["password_hash"],
        role=Role(data["role"]),
        wallet_balance=data["wallet_balance"],
        phone=data["phone"],
        created_at=data["created_at"],
        last_login=data["last_login"],
    )


class SqlUserRepository(UserRepository):
    """Reads and writes the users table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def get_by_id(self, user_id: int, for_update: bool = False) -> Optional[User]:
        query = select(users).where(users.c.id == user_id)
        if for_update:
            query = query.with_for_update()
        row = self._conn.execute(query).first()
        return row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        query = select(users).where(func.lower(users.c.email) == email.lower())
        row = self._conn.execute(query).first()
        return row_to_user(row) if row else None

    def add(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        wallet_balance: Decimal,
        phone: Optional[str] = None,
    ) -> User:
        """Insert a user inside a savepoint so a duplicate leaves the transaction usable.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        try:
            with self._conn.begin_nested():
                result = self._conn.execute(
                    users.insert().values(
                        name=name,
                        email=email,
                        password_hash=password_hash,
                        role=role.value,
                        wallet_balance=wallet_balance,
                        phone=phone,
                    )
                )
        except IntegrityError as exc:
            raise EmailAlreadyRegisteredError(email) from exc

        user_id = result.inserted_primary_key[0]
        logger.debug("Inserted user id=%d.", user_id)
        return self.get_by_id(user_id)

    def update_profile(
        self, user_id: int, *, name: Optional[str] = None, phone: Optional[str] = None
    ) -> Optional[User]:
        values: dict[str, Any] = {}
        if name is not None:
            values["name"] = name
        if phone is not None:
            values["phone"] = phone
        if values:
            self._conn.execute(update(users).where(users.c.id == user_id).values(**values))
        return self.get_by_id(user_id)

    def update_password(self, user_id: int, password_hash: str) -> None:
        self._conn.execute(
            update(users).where(users.c.id == user_id).values(password_hash=password_hash)
        )

    def record_login(self, user_id: int, at: datetime) -> None:
        self._conn.execute(update(users).where(users.c.id == user_id).values(last_login=at))

    def debit_wallet(self, user_id: int, amount: Decimal) -> bool:
        """Guarded debit: the WHERE clause refuses to overdraw the wallet."""
        result = self._conn.execute(
            update(users)
            .where(users.c.id == user_id)
            .where(users.c.wallet_balance >= amount)
            .values(wallet_balance=users.c.wallet_balance - amount)
        )
        return result.rowcount == 1

    def credit_wallet(self, user_id: int, amount: Decimal) -> None:
        self._conn.execute(
            update(users)
            .where(users.c.id == user_id)
            .values(wallet_balance=users.c.wallet_balance + amount)
        )

    def list_all(self) -> list[User]:
        query = select(users).order_by(users.c.created_at.desc(), users.c.id.desc())
        return [row_to_user(row) for row in self._conn.execute(query)]

    def count(self) -> int:
        return self._conn.execute(select(func.count()).select_from(users)).scalar_one()
