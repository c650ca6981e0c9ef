"""
Port interfaces (ABCs) for the accounts bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
Repository ports are bound to one open database transaction; see
`papertrade.domain.unit_of_work`.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from papertrade.domain.accounts.entities import (
    ActivityDay,
    AuditAction,
    AuditEntry,
    AuditFilter,
    AuditStats,
    KycRecord,
    KycStatus,
    Notification,
    NotificationDraft,
    NotificationStats,
    Role,
    TokenClaims,
    User,
)


class UserRepository(ABC):
    """Port for user accounts and their wallets."""

    @abstractmethod
    def get_by_id(self, user_id: int, for_update: bool = False) -> Optional[User]:
        """Return a user by id, or None.

        Args:
            user_id: Primary key of the user.
            for_update: Lock the row until the transaction ends.
        """
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by email (case-insensitive), or None."""
        raise NotImplementedError

    @abstractmethod
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
        """Persist a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def update_profile(
        self, user_id: int, *, name: Optional[str] = None, phone: Optional[str] = None
    ) -> Optional[User]:
        """Update editable profile fields; None values are left unchanged."""
        raise NotImplementedError

    @abstractmethod
    def update_password(self, user_id: int, password_hash: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def record_login(self, user_id: int, at: datetime) -> None:
        raise NotImplementedError

    @abstractmethod
    def debit_wallet(self, user_id: int, amount: Decimal) -> bool:
        """Subtract `amount` only if the balance covers it.

        Returns:
            True if the debit was applied, False if the balance was short.
        """
        raise NotImplementedError

    @abstractmethod
    def credit_wallet(self, user_id: int, amount: Decimal) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class KycRepository(ABC):
    """Port for KYC submissions."""

    @abstractmethod
    def get_for_user(self, user_id: int) -> Optional[KycRecord]:
        raise NotImplementedError

    @abstractmethod
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
        """Persist a pending KYC record.

        Raises:
            DuplicatePanNumberError: If the PAN is registered to another user.
        """
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[KycRecord]:
        """Return every submission, newest first, with the owner's name and email."""
        raise NotImplementedError

    @abstractmethod
    def update_status(self, kyc_id: int, status: KycStatus) -> Optional[KycRecord]:
        raise NotImplementedError


class NotificationRepository(ABC):
    """Port for in-app notifications."""

    @abstractmethod
    def add(self, draft: NotificationDraft) -> Notification:
        raise NotImplementedError

    @abstractmethod
    def add_many(self, drafts: list[NotificationDraft]) -> list[Notification]:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> list[Notification]:
        raise NotImplementedError

    @abstractmethod
    def unread_count(self, user_id: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def stats(self, user_id: int) -> NotificationStats:
        raise NotImplementedError

    @abstractmethod
    def mark_read(self, notification_id: int, user_id: int) -> Optional[Notification]:
        raise NotImplementedError

    @abstractmethod
    def mark_all_read(self, user_id: int) -> int:
        """Mark every unread notification as read and return how many changed."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, notification_id: int, user_id: int) -> Optional[Notification]:
        raise NotImplementedError


class AuditLogRepository(ABC):
    """Port for the append-only audit trail."""

    @abstractmethod
    def add(
        self,
        *,
        action: AuditAction,
        resource: str,
        user_id: Optional[int] = None,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditEntry:
        raise NotImplementedError

    @abstractmethod
    def search(
        self, filters: AuditFilter, limit: int = 50, offset: int = 0
    ) -> list[AuditEntry]:
        raise NotImplementedError

    @abstractmethod
    def stats(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> AuditStats:
        raise NotImplementedError

    @abstractmethod
    def activity_for_user(self, user_id: int, limit: int = 30) -> list[ActivityDay]:
        raise NotImplementedError

    @abstractmethod
    def for_resource(
        self, resource: str, resource_id: str, limit: int = 50
    ) -> list[AuditEntry]:
        raise NotImplementedError

    @abstractmethod
    def delete_older_than(self, cutoff: datetime) -> int:
        raise NotImplementedError


class PasswordHasher(ABC):
    """Port for one-way password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        raise NotImplementedError


class TokenService(ABC):
    """Port for issuing and verifying bearer access tokens."""

    @abstractmethod
    def issue(self, user: User, remember_me: bool = False) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is malformed or forged.
        """
        raise NotImplementedError
