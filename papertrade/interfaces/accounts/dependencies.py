"""
Dependency injection for the accounts bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the accounts context.
"""

from fastapi import Depends

from papertrade.application.accounts.admin import (
    AdjustWalletUseCase,
    GetDashboardUseCase,
    GetUserDetailUseCase,
    ListUsersUseCase,
)
from papertrade.application.accounts.audit import (
    CleanAuditLogsUseCase,
    GetAuditStatsUseCase,
    GetResourceActivityUseCase,
    GetUserActivityUseCase,
    ListAuditLogsUseCase,
)
from papertrade.application.accounts.kyc import (
    GetKycStatusUseCase,
    ListKycRecordsUseCase,
    SubmitKycUseCase,
    UpdateKycStatusUseCase,
)
from papertrade.application.accounts.login_user import LoginUserUseCase
from papertrade.application.accounts.notifications import (
    CreateBulkNotificationsUseCase,
    CreateNotificationUseCase,
    DeleteNotificationUseCase,
    GetNotificationStatsUseCase,
    GetUnreadCountUseCase,
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from papertrade.application.accounts.profile import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileUseCase,
)
from papertrade.application.accounts.register_user import RegisterUserUseCase
from papertrade.core.config import Settings
from papertrade.domain.accounts.ports import PasswordHasher, TokenService
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.interfaces.dependencies import (
    get_password_hasher,
    get_settings,
    get_token_service,
    get_uow_factory,
)


# ── Auth & profile ────────────────────────────────────────────────


def get_register_user_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> RegisterUserUseCase:
    """Build RegisterUserUseCase with the configured starting balance."""
    return RegisterUserUseCase(
        uow_factory=uow_factory,
        hasher=hasher,
        tokens=tokens,
        initial_balance=settings.initial_wallet_balance,
    )


def get_login_user_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> LoginUserUseCase:
    return LoginUserUseCase(uow_factory=uow_factory, hasher=hasher, tokens=tokens)


def get_profile_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetProfileUseCase:
    return GetProfileUseCase(uow_factory=uow_factory)


def get_update_profile_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> UpdateProfileUseCase:
    return UpdateProfileUseCase(uow_factory=uow_factory)


def get_change_password_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(uow_factory=uow_factory, hasher=hasher)


# ── KYC ───────────────────────────────────────────────────────────


def get_submit_kyc_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> SubmitKycUseCase:
    return SubmitKycUseCase(uow_factory=uow_factory)


def get_kyc_status_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetKycStatusUseCase:
    return GetKycStatusUseCase(uow_factory=uow_factory)


def get_list_kyc_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListKycRecordsUseCase:
    return ListKycRecordsUseCase(uow_factory=uow_factory)


def get_update_kyc_status_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> UpdateKycStatusUseCase:
    return UpdateKycStatusUseCase(uow_factory=uow_factory)


# ── Notifications ─────────────────────────────────────────────────


def get_list_notifications_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListNotificationsUseCase:
    return ListNotificationsUseCase(uow_factory=uow_factory)


def get_unread_count_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetUnreadCountUseCase:
    return GetUnreadCountUseCase(uow_factory=uow_factory)


def get_notification_stats_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetNotificationStatsUseCase:
    return GetNotificationStatsUseCase(uow_factory=uow_factory)


def get_mark_read_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> MarkNotificationReadUseCase:
    return MarkNotificationReadUseCase(uow_factory=uow_factory)


def get_mark_all_read_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> MarkAllNotificationsReadUseCase:
    return MarkAllNotificationsReadUseCase(uow_factory=uow_factory)


def get_delete_notification_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DeleteNotificationUseCase:
    return DeleteNotificationUseCase(uow_factory=uow_factory)


def get_create_notification_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CreateNotificationUseCase:
    return CreateNotificationUseCase(uow_factory=uow_factory)


def get_create_bulk_notifications_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CreateBulkNotificationsUseCase:
    return CreateBulkNotificationsUseCase(uow_factory=uow_factory)


# ── Audit ─────────────────────────────────────────────────────────


def get_list_audit_logs_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListAuditLogsUseCase:
    return ListAuditLogsUseCase(uow_factory=uow_factory)


def get_audit_stats_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetAuditStatsUseCase:
    return GetAuditStatsUseCase(uow_factory=uow_factory)


def get_user_activity_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetUserActivityUseCase:
    return GetUserActivityUseCase(uow_factory=uow_factory)


def get_resource_activity_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetResourceActivityUseCase:
    return GetResourceActivityUseCase(uow_factory=uow_factory)


def get_clean_audit_logs_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CleanAuditLogsUseCase:
    return CleanAuditLogsUseCase(uow_factory=uow_factory)


# ── Admin ─────────────────────────────────────────────────────────


def get_dashboard_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetDashboardUseCase:
    return GetDashboardUseCase(uow_factory=uow_factory)


def get_list_users_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListUsersUseCase:
    return ListUsersUseCase(uow_factory=uow_factory)


def get_user_detail_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetUserDetailUseCase:
    return GetUserDetailUseCase(uow_factory=uow_factory)


def get_adjust_wallet_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> AdjustWalletUseCase:
    return AdjustWalletUseCase(uow_factory=uow_factory)
