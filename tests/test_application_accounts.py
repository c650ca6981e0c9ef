"""
Tests for the accounts application layer.

Covers registration, login, profile changes, KYC, notifications,
the audit trail and the admin wallet adjustment against a real SQLite
database.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from papertrade.application.accounts.admin import AdjustWalletUseCase, GetDashboardUseCase
from papertrade.application.accounts.audit import (
    CleanAuditLogsUseCase,
    GetAuditStatsUseCase,
    ListAuditLogsUseCase,
)
from papertrade.application.accounts.dtos import (
    ChangePasswordCommand,
    CreateNotificationCommand,
    LoginCommand,
    RegisterUserCommand,
    SubmitKycCommand,
)
from papertrade.application.accounts.kyc import SubmitKycUseCase, UpdateKycStatusUseCase
from papertrade.application.accounts.login_user import LoginUserUseCase
from papertrade.application.accounts.notifications import (
    CreateBulkNotificationsUseCase,
    GetUnreadCountUseCase,
    MarkAllNotificationsReadUseCase,
)
from papertrade.application.accounts.profile import ChangePasswordUseCase
from papertrade.application.accounts.register_user import RegisterUserUseCase
from papertrade.application.audit_trail import RequestContext
from papertrade.domain.accounts.entities import (
    AuditAction,
    AuditFilter,
    KycStatus,
    NotificationType,
    Role,
)
from papertrade.domain.accounts.errors import (
    DuplicatePanNumberError,
    EmailAlreadyRegisteredError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    KycAlreadySubmittedError,
    NegativeWalletBalanceError,
    UserNotFoundError,
)
from papertrade.domain.errors import ResourceNotFoundError, ValidationError
from papertrade.infrastructure.database.tables import audit_logs
from papertrade.shared.clock import utcnow

TEST_PASSWORD = "password123"


@pytest.fixture
def register(uow_factory, hasher, tokens) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        uow_factory=uow_factory,
        hasher=hasher,
        tokens=tokens,
        initial_balance=Decimal("100000.00"),
    )


def _kyc_command(user_id: int, pan: str = "ABCDE1234F") -> SubmitKycCommand:
    return SubmitKycCommand(
        user_id=user_id,
        name="Test User",
        email="Trader@Example.com",
        pan_number=pan,
        address="12 Market Street",
        phone="9876543210",
    )


class TestRegisterAndLogin:
    """Tests for account creation and login."""

    def test_register_funds_wallet_and_issues_token(self, register, tokens) -> None:
        result = register.execute(
            RegisterUserCommand(name=" Jane ", email="Jane@Example.COM", password="secret1")
        )

        assert result.user.email == "jane@example.com"
        assert result.user.name == "Jane"
        assert result.user.role is Role.USER
        assert result.user.wallet_balance == Decimal("100000.00")
        assert tokens.decode(result.token).user_id == result.user.id

    def test_duplicate_email_is_rejected(self, register) -> None:
        register.execute(RegisterUserCommand(name="A", email="a@example.com", password="secret1"))

        with pytest.raises(EmailAlreadyRegisteredError):
            register.execute(
                RegisterUserCommand(name="B", email="A@example.com", password="secret2")
            )

    def test_register_writes_audit_entry_with_context(self, register, uow_factory) -> None:
        context = RequestContext(ip_address="10.0.0.1", user_agent="pytest")
        result = register.execute(
            RegisterUserCommand(name="A", email="a@example.com", password="secret1"), context
        )

        with uow_factory() as uow:
            entries = uow.audit_logs.search(AuditFilter(user_id=result.user.id))
        assert [e.action for e in entries] == [AuditAction.CREATE]
        assert entries[0].ip_address == "10.0.0.1"

    def test_login_records_last_login(self, uow_factory, hasher, tokens, user) -> None:
        use_case = LoginUserUseCase(uow_factory=uow_factory, hasher=hasher, tokens=tokens)

        result = use_case.execute(LoginCommand(email=user.email, password=TEST_PASSWORD))

        assert result.user.last_login is not None
        with uow_factory() as uow:
            assert uow.users.get_by_id(user.id).last_login is not None

    def test_wrong_password_and_unknown_email_fail_alike(
        self, uow_factory, hasher, tokens, user
    ) -> None:
        use_case = LoginUserUseCase(uow_factory=uow_factory, hasher=hasher, tokens=tokens)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            use_case.execute(LoginCommand(email=user.email, password="not-the-password"))
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            use_case.execute(LoginCommand(email="nobody@example.com", password=TEST_PASSWORD))

        assert str(wrong_password.value) == str(unknown_email.value)

    def test_change_password(self, uow_factory, hasher, user) -> None:
        use_case = ChangePasswordUseCase(uow_factory=uow_factory, hasher=hasher)

        with pytest.raises(IncorrectPasswordError):
            use_case.execute(
                ChangePasswordCommand(
                    user_id=user.id, current_password="wrong", new_password="newpass1"
                )
            )

        use_case.execute(
            ChangePasswordCommand(
                user_id=user.id, current_password=TEST_PASSWORD, new_password="newpass1"
            )
        )
        with uow_factory() as uow:
            stored = uow.users.get_by_id(user.id)
        assert hasher.verify("newpass1", stored.password_hash)


class TestKyc:
    """Tests for KYC submission and review."""

    def test_submission_is_pending_and_email_lowercased(self, uow_factory, user) -> None:
        record = SubmitKycUseCase(uow_factory).execute(_kyc_command(user.id))

        assert record.status is KycStatus.PENDING
        assert record.email == "trader@example.com"

    def test_second_submission_is_rejected(self, uow_factory, user) -> None:
        use_case = SubmitKycUseCase(uow_factory)
        use_case.execute(_kyc_command(user.id))

        with pytest.raises(KycAlreadySubmittedError):
            use_case.execute(_kyc_command(user.id, pan="ZZZZZ9999Z"))

    def test_pan_number_is_unique_across_users(self, uow_factory, make_user) -> None:
        use_case = SubmitKycUseCase(uow_factory)
        use_case.execute(_kyc_command(make_user().id))

        with pytest.raises(DuplicatePanNumberError):
            use_case.execute(_kyc_command(make_user().id))

    def test_admin_updates_status(self, uow_factory, user, admin) -> None:
        record = SubmitKycUseCase(uow_factory).execute(_kyc_command(user.id))

        updated = UpdateKycStatusUseCase(uow_factory).execute(
            record.id, KycStatus.APPROVED, admin.id
        )

        assert updated.status is KycStatus.APPROVED
        with pytest.raises(ResourceNotFoundError):
            UpdateKycStatusUseCase(uow_factory).execute(999, KycStatus.REJECTED, admin.id)


class TestNotifications:
    """Tests for admin-created notifications and read state."""

    def _command(self, user_id: int, title: str = "Hello") -> CreateNotificationCommand:
        return CreateNotificationCommand(
            user_id=user_id, type=NotificationType.SYSTEM, title=title, message="Body"
        )

    def test_bulk_create_is_all_or_nothing(self, uow_factory, user) -> None:
        use_case = CreateBulkNotificationsUseCase(uow_factory)

        with pytest.raises(UserNotFoundError):
            use_case.execute([self._command(user.id), self._command(9999)])

        assert GetUnreadCountUseCase(uow_factory).execute(user.id) == 0

    def test_bulk_create_and_mark_all_read(self, uow_factory, user) -> None:
        created = CreateBulkNotificationsUseCase(uow_factory).execute(
            [self._command(user.id, "One"), self._command(user.id, "Two")]
        )

        assert len(created) == 2
        assert GetUnreadCountUseCase(uow_factory).execute(user.id) == 2
        assert MarkAllNotificationsReadUseCase(uow_factory).execute(user.id) == 2
        assert GetUnreadCountUseCase(uow_factory).execute(user.id) == 0

    def test_empty_bulk_request_is_rejected(self, uow_factory) -> None:
        with pytest.raises(ValidationError):
            CreateBulkNotificationsUseCase(uow_factory).execute([])


class TestAuditTrail:
    """Tests for audit queries and retention cleanup."""

    def _add(self, uow_factory, user_id, action=AuditAction.VIEW, resource="product"):
        with uow_factory() as uow:
            return uow.audit_logs.add(
                action=action, resource=resource, user_id=user_id, resource_id="1"
            )

    def test_clean_removes_only_old_entries(self, uow_factory, engine, user) -> None:
        self._add(uow_factory, user.id)
        with engine.begin() as conn:
            conn.execute(
                audit_logs.insert().values(
                    action=AuditAction.VIEW.value,
                    resource="product",
                    user_id=user.id,
                    created_at=utcnow() - timedelta(days=120),
                )
            )

        deleted = CleanAuditLogsUseCase(uow_factory).execute(days_to_keep=90)

        assert deleted == 1
        with uow_factory() as uow:
            assert len(uow.audit_logs.search(AuditFilter(user_id=user.id))) == 1

    def test_clean_requires_positive_retention(self, uow_factory) -> None:
        with pytest.raises(ValidationError):
            CleanAuditLogsUseCase(uow_factory).execute(days_to_keep=0)

    def test_stats_count_actions_and_users(self, uow_factory, make_user) -> None:
        first, second = make_user(), make_user()
        self._add(uow_factory, first.id, AuditAction.CREATE, "transaction")
        self._add(uow_factory, second.id, AuditAction.CREATE, "transaction")
        self._add(uow_factory, second.id, AuditAction.UPDATE, "transaction")

        stats = GetAuditStatsUseCase(uow_factory).execute()

        assert stats.total_logs == 3
        assert stats.unique_users == 2
        assert stats.action_counts["create"] == 2
        assert stats.action_counts["update"] == 1
        assert stats.action_counts["delete"] == 0

    def test_list_rejects_inverted_date_range(self, uow_factory) -> None:
        now = utcnow()
        with pytest.raises(ValidationError):
            ListAuditLogsUseCase(uow_factory).execute(
                AuditFilter(start_date=now, end_date=now - timedelta(days=1))
            )


class TestAdminUseCases:
    """Tests for the admin wallet adjustment and dashboard."""

    def test_credit_and_debit(self, uow_factory, admin, make_user) -> None:
        target = make_user(balance=Decimal("100.00"))
        use_case = AdjustWalletUseCase(uow_factory)

        assert use_case.execute(target.id, Decimal("50.005"), admin.id).wallet_balance == Decimal(
            "150.01"
        )
        assert use_case.execute(target.id, Decimal("-50.01"), admin.id).wallet_balance == Decimal(
            "100.00"
        )

    def test_zero_and_overdraw_are_rejected(self, uow_factory, admin, make_user) -> None:
        target = make_user(balance=Decimal("10.00"))
        use_case = AdjustWalletUseCase(uow_factory)

        with pytest.raises(ValidationError):
            use_case.execute(target.id, Decimal("0"), admin.id)
        with pytest.raises(NegativeWalletBalanceError):
            use_case.execute(target.id, Decimal("-10.01"), admin.id)
        with pytest.raises(UserNotFoundError):
            use_case.execute(9999, Decimal("1"), admin.id)

        with uow_factory() as uow:
            assert uow.users.get_by_id(target.id).wallet_balance == Decimal("10.00")

    def test_dashboard_counts(self, uow_factory, admin, user, make_product) -> None:
        make_product()
        make_product()

        dashboard = GetDashboardUseCase(uow_factory).execute()

        assert dashboard.stats.total_users == 2
        assert dashboard.stats.total_products == 2
        assert dashboard.stats.total_transactions == 0
        assert dashboard.stats.total_volume == Decimal("0")
        assert dashboard.recent_transactions == []
