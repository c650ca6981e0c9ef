"""
Use case: Register a new account.

Input: RegisterUserCommand
Output: AuthResult (user, access token)
Side effects: Inserts a user with the configured starting wallet
    balance and writes an audit entry.
Failure cases: EmailAlreadyRegisteredError.
"""

import logging
from decimal import Decimal

from papertrade.application.accounts.dtos import AuthResult, RegisterUserCommand
from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.domain.accounts.entities import AuditAction, Role
from papertrade.domain.accounts.errors import EmailAlreadyRegisteredError
from papertrade.domain.accounts.ports import PasswordHasher, TokenService
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    """Creates a user account funded with virtual money."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        hasher: PasswordHasher,
        tokens: TokenService,
        initial_balance: Decimal,
    ) -> None:
        """Initialize the use case.

        Args:
            uow_factory: Opens one database transaction per call.
            hasher: Hashes the plain-text password.
            tokens: Issues the access token returned to the client.
            initial_balance: Wallet balance granted on sign-up.
        """
        self._uow_factory = uow_factory
        self._hasher = hasher
        self._tokens = tokens
        self._initial_balance = initial_balance

    def execute(
        self, command: RegisterUserCommand, context: RequestContext = ANONYMOUS
    ) -> AuthResult:
        email = command.email.strip().lower()
        password_hash = self._hasher.hash(command.password)

        with self._uow_factory() as uow:
            if uow.users.get_by_email(email) is not None:
                raise EmailAlreadyRegisteredError(email)
            user = uow.users.add(
                name=command.name.strip(),
                email=email,
                password_hash=password_hash,
                role=Role.USER,
                wallet_balance=self._initial_balance,
                phone=command.phone,
            )
            record_audit(
                uow,
                context,
                action=AuditAction.CREATE,
                resource="user",
                user_id=user.id,
                resource_id=user.id,
                details={"email": user.email},
            )

        logger.info("User registered: id=%d", user.id)
        return AuthResult(user=user, token=self._tokens.issue(user))
