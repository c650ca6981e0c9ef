"""
Domain entities for the accounts bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class Role(Enum):
    """Access level of a user."""

    USER = "user"
    ADMIN = "admin"


class KycStatus(Enum):
    """Review state of a KYC submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(Enum):
    """Category of an in-app notification."""

    ORDER = "order"
    ALERT = "alert"
    SYSTEM = "system"
    TRANSACTION = "transaction"


class AuditAction(Enum):
    """Kind of action recorded in the audit trail."""

    LOGIN = "login"
    LOGOUT = "logout"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW = "view"


@dataclass(frozen=True)
class User:
    """A registered account holding a virtual wallet.

    Invariant: `wallet_balance` never goes negative.
    """

    id: int
    name: str
    email: str
    password_hash: str
    role: Role
    wallet_balance: Decimal
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    user_id: int
    role: Optional[str] = None


@dataclass(frozen=True)
class KycRecord:
    """Know-your-customer details submitted by a user."""

    id: int
    user_id: int
    name: str
    email: str
    pan_number: str
    address: str
    phone: str
    status: KycStatus
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    """An in-app message addressed to one user."""

    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    is_read: bool
    data: Optional[dict[str, Any]] = None
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NotificationDraft:
    """A notification that has not been persisted yet."""

    user_id: int
    type: NotificationType
    title: str
    message: str
    data: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class NotificationStats:
    """Notification counts for one user, by read state and type."""

    total_notifications: int
    unread_count: int
    order_notifications: int
    alert_notifications: int
    system_notifications: int
    transaction_notifications: int


@dataclass(frozen=True)
class AuditEntry:
    """A single row of the audit trail."""

    id: int
    action: AuditAction
    resource: str
    user_id: Optional[int] = None
    resource_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None


@dataclass(frozen=True)
class AuditFilter:
    """Optional criteria for listing audit entries."""

    user_id: Optional[int] = None
    action: Optional[AuditAction] = None
    resource: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


@dataclass(frozen=True)
class AuditStats:
    """Audit trail counts, overall and per action."""

    total_logs: int
    unique_users: int
    action_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ActivityDay:
    """One user's audited activity on a single day."""

    date: date
    activity_count: int
    login_count: int
    create_count: int
    update_count: int
    delete_count: int
