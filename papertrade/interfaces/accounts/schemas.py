"""
Pydantic schemas for accounts API request/response validation.

Request bodies accept the camelCase keys used by the web client
(`confirmPassword`, `rememberMe`, `panNumber`, ...) as well as
their snake_case field names.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from papertrade.domain.accounts.entities import (
    AuditAction,
    KycStatus,
    NotificationType,
    Role,
)
from papertrade.interfaces.trading.schemas import (
    HoldingSchema,
    ProductActivitySchema,
    ReadModel,
    TransactionSchema,
)

PHONE_PATTERN = r"^[6-9]\d{9}$"
PAN_PATTERN = r"^[A-Z]{5}[0-9]{4}[A-Z]$"

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError("Password must be at most 72 bytes")
    return value


class CamelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ── Auth & profile ────────────────────────────────────────────────


class RegisterRequest(CamelRequest):
    """Request schema for sign-up.

    Attributes:
        name: 2 to 50 characters.
        email: A valid email address.
        password: 6 to 72 characters.
        confirm_password: Must equal `password` (JSON key `confirmPassword`).
    """

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    confirm_password: str = Field(..., alias="confirmPassword")
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(CamelRequest):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)
    remember_me: bool = Field(default=False, alias="rememberMe")


class UserSchema(ReadModel):
    """Public view of a user. Never includes the password hash."""

    id: int
    name: str
    email: str
    role: Role
    wallet_balance: Decimal
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class AuthData(ReadModel):
    user: UserSchema
    token: str


class UserData(ReadModel):
    user: UserSchema


class UpdateProfileRequest(CamelRequest):
    """Partial profile update; omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)


class ChangePasswordRequest(CamelRequest):
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=72)

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


# ── KYC ───────────────────────────────────────────────────────────


class KycSubmitRequest(CamelRequest):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    pan_number: str = Field(..., alias="panNumber", pattern=PAN_PATTERN)
    address: str = Field(..., min_length=10, max_length=200)
    phone: str = Field(..., pattern=PHONE_PATTERN)


class KycSchema(ReadModel):
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


class KycData(ReadModel):
    kyc: Optional[KycSchema] = None


class KycListData(ReadModel):
    kyc_records: list[KycSchema]


class KycStatusUpdateRequest(BaseModel):
    status: KycStatus


# ── Notifications ─────────────────────────────────────────────────


class NotificationSchema(ReadModel):
    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    is_read: bool
    data: Optional[dict[str, Any]] = None
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NotificationData(ReadModel):
    notification: NotificationSchema


class NotificationsData(ReadModel):
    notifications: list[NotificationSchema]
    limit: int
    offset: int


class UnreadCountData(ReadModel):
    unread_count: int


class NotificationStatsSchema(ReadModel):
    total_notifications: int
    unread_count: int
    order_notifications: int
    alert_notifications: int
    system_notifications: int
    transaction_notifications: int


class NotificationStatsData(ReadModel):
    stats: NotificationStatsSchema


class MarkAllReadData(ReadModel):
    updated_count: int


class CreateNotificationRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    type: NotificationType = NotificationType.SYSTEM
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    data: Optional[dict[str, Any]] = None


class BulkNotificationRequest(BaseModel):
    notifications: list[CreateNotificationRequest] = Field(..., min_length=1, max_length=1000)


class BulkNotificationData(ReadModel):
    notifications: list[NotificationSchema]
    created_count: int


# ── Audit ─────────────────────────────────────────────────────────


class AuditEntrySchema(ReadModel):
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


class AuditLogsData(ReadModel):
    logs: list[AuditEntrySchema]
    limit: int
    offset: int


class AuditStatsSchema(ReadModel):
    total_logs: int
    unique_users: int
    action_counts: dict[str, int]


class AuditStatsData(ReadModel):
    stats: AuditStatsSchema


class ActivityDaySchema(ReadModel):
    date: date
    activity_count: int
    login_count: int
    create_count: int
    update_count: int
    delete_count: int


class UserActivityData(ReadModel):
    activity: list[ActivityDaySchema]


class ResourceActivityData(ReadModel):
    resource: str
    resource_id: str
    logs: list[AuditEntrySchema]


class AuditCleanData(ReadModel):
    deleted_count: int
    days_to_keep: int


# ── Admin ─────────────────────────────────────────────────────────


class DashboardStatsSchema(ReadModel):
    total_users: int
    total_products: int
    total_transactions: int
    total_volume: Decimal


class DashboardData(ReadModel):
    stats: DashboardStatsSchema
    recent_transactions: list[TransactionSchema]
    top_products: list[ProductActivitySchema]


class UsersData(ReadModel):
    users: list[UserSchema]


class UserDetailData(ReadModel):
    user: UserSchema
    transactions: list[TransactionSchema]
    holdings: list[HoldingSchema]


class WalletAdjustRequest(BaseModel):
    """Signed amount to add to a wallet. Negative values remove funds."""

    amount: Decimal = Field(..., max_digits=15, decimal_places=2)
