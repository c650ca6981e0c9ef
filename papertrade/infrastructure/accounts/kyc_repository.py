"""
Adapter: KYC repository.

Implements KycRepository port on SQLAlchemy Core.
"""

from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from papertrade.domain.accounts.entities import KycRecord, KycStatus
from papertrade.domain.accounts.errors import (
    DuplicatePanNumberError,
    KycAlreadySubmittedError,
)
from papertrade.domain.accounts.ports import KycRepository
from papertrade.infrastructure.database.tables import kyc, users


def _row_to_kyc(row: Any) -> KycRecord:
    data = row._mapping
    return KycRecord(
        id=data["id"],
        user_id=data["user_id"],
        name=data["name"],
        email=data["email"],
        pan_number=data["pan_number"],
        address=data["address"],
        phone=data["phone"],
        status=KycStatus(data["status"]),
        created_at=data["created_at"],
        user_name=data.get("user_name"),
        user_email=data.get("user_email"),
    )


class SqlKycRepository(KycRepository):
    """Reads and writes the kyc table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def _get(self, kyc_id: int) -> Optional[KycRecord]:
        row = self._conn.execute(select(kyc).where(kyc.c.id == kyc_id)).first()
        return _row_to_kyc(row) if row else None

    def get_for_user(self, user_id: int) -> Optional[KycRecord]:
        row = self._conn.execute(select(kyc).where(kyc.c.user_id == user_id)).first()
        return _row_to_kyc(row) if row else None

    def add(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        pan_number: str,
        address: str,
        phone: str,
    ) -> KycRecord:
        """Insert a pending record.

        A unique violation on user_id means a second submission; on
        pan_number it means the PAN belongs to someone else.
        """
        if self.get_for_user(user_id) is not None:
            raise KycAlreadySubmittedError(user_id)
        try:
            with self._conn.begin_nested():
                result = self._conn.execute(
                    kyc.insert().values(
                        user_id=user_id,
                        name=name,
                        email=email,
                        pan_number=pan_number,
                        address=address,
                        phone=phone,
                        status=KycStatus.PENDING.value,
                    )
                )
        except IntegrityError as exc:
            if self.get_for_user(user_id) is not None:
                raise KycAlreadySubmittedError(user_id) from exc
            raise DuplicatePanNumberError() from exc
        return self._get(result.inserted_primary_key[0])

    def list_all(self) -> list[KycRecord]:
        query = (
            select(
                kyc,
                users.c.name.label("user_name"),
                users.c.email.label("user_email"),
            )
            .join(users, users.c.id == kyc.c.user_id)
            .order_by(kyc.c.created_at.desc(), kyc.c.id.desc())
        )
        return [_row_to_kyc(row) for row in self._conn.execute(query)]

    def update_status(self, kyc_id: int, status: KycStatus) -> Optional[KycRecord]:
        result = self._conn.execute(
            update(kyc).where(kyc.c.id == kyc_id).values(status=status.value)
        )
        if result.rowcount == 0:
            return None
        return self._get(kyc_id)
