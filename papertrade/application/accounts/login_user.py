"""
Use case: Log in with email and password.

Input: LoginCommand
Output: AuthResult (user, access token)
Side effects: Updates last_login and writes a login audit entry.
Failure cases: InvalidCredentialsError for an unknown email or a wrong
    password (the two are indistinguishable to the caller).
"""

import logging
from dataclasses import replace

from papertrade.application.accounts.dtos import AuthResult, LoginCommand
from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.domain.accounts.entities import AuditAction
from papertrade.domain.accounts.errors import InvalidCredentialsError
from papertrade.domain.accounts.ports import PasswordHasher, TokenService
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.shared.clock import utcnow

logger = logging.getLogger(__name__)


class LoginUserUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self._uow_factory = uow_factory
        self._hasher = hasher
        self._tokens = tokens

    def execute(
        self, command: LoginCommand, context: RequestContext = ANONYMOUS
    ) -> AuthResult:
        with self._uow_factory() as uow:
            user = uow.users.get_by_email(command.email.strip())
            if user is None or not self._hasher.verify(command.password, user.password_hash):
                logger.warning("Failed login attempt.")
                raise InvalidCredentialsError()

            now = utcnow()
            uow.users.record_login(user.id, now)
            record_audit(
                uow,
                context,
                action=AuditAction.LOGIN,
                resource="user",
                user_id=user.id,
                resource_id=user.id,
                details={"remember_me": command.remember_me},
            )

        logger.info("User logged in: id=%d", user.id)
        user = replace(user, last_login=now)
        return AuthResult(user=user, token=self._tokens.issue(user, command.remember_me))
