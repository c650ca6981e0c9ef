"""
Data Transfer Objects for the accounts application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from papertrade.domain.accounts.entities import NotificationType, User
from papertrade.domain.trading.entities import Holding, ProductActivity, Transaction


@dataclass(frozen=True)
class RegisterUserCommand:
    """Input DTO for creating an account.

    Attributes:
        name: Display name.
        email: Login email; stored lowercased.
        password: Plain-text password, hashed before storage.
        phone: Optional mobile number.
    """

    name: str
    email: str
    password: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class LoginCommand:
    email: str
    password: str
    remember_me: bool = False


@dataclass(frozen=True)
class AuthResult:
    """A user and a freshly issued access token."""

    user: User
    token: str


@dataclass(frozen=True)
class UpdateProfileCommand:
    user_id: int
    name: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class ChangePasswordCommand:
    user_id: int
    current_password: str
    new_password: str


@dataclass(frozen=True)
class SubmitKycCommand:
    user_id: int
    name: str
    email: str
    pan_number: str
    address: str
    phone: str


@dataclass(frozen=True)
class CreateNotificationCommand:
    user_id: int
    type: NotificationType
    title: str
    message: str
    data: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_products: int
    total_transactions: int
    total_volume: Decimal


@dataclass(frozen=True)
class Dashboard:
    """Admin overview of platform activity.

    Attributes:
        stats: Headline counts and buy volume.
        recent_transactions: Latest ledger entries, newest first.
        top_products: Products with the highest traded amount.
    """

    stats: DashboardStats
    recent_transactions: list[Transaction]
    top_products: list[ProductActivity]


@dataclass(frozen=True)
class UserDetail:
    user: User
    transactions: list[Transaction]
    holdings: list[Holding]
