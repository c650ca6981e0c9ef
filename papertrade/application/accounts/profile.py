"""
Use cases: Read and edit the caller's own profile.

Wallet balance and role are never editable here.
"""

import logging

from papertrade.application.accounts.dtos import ChangePasswordCommand, UpdateProfileCommand
from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.domain.accounts.entities import AuditAction, User
from papertrade.domain.accounts.errors import IncorrectPasswordError, UserNotFoundError
from papertrade.domain.accounts.ports import PasswordHasher
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class GetProfileUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> User:
        with self._uow_factory() as uow:
            user = uow.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user


class UpdateProfileUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self, command: UpdateProfileCommand, context: RequestContext = ANONYMOUS
    ) -> User:
        name = command.name.strip() if command.name is not None else None
        with self._uow_factory() as uow:
            user = uow.users.update_profile(command.user_id, name=name, phone=command.phone)
            if user is None:
                raise UserNotFoundError(command.user_id)
            changed = {
                key: value
                for key, value in (("name", name), ("phone", command.phone))
                if value is not None
            }
            record_audit(
                uow,
                context,
                action=AuditAction.UPDATE,
                resource="user",
                user_id=user.id,
                resource_id=user.id,
                details={"fields": sorted(changed)},
            )
        return user


class ChangePasswordUseCase:
    """Replace the password after verifying the current one."""

    def __init__(self, uow_factory: UnitOfWorkFactory, hasher: PasswordHasher) -> None:
        self._uow_factory = uow_factory
        self._hasher = hasher

    def execute(
        self, command: ChangePasswordCommand, context: RequestContext = ANONYMOUS
    ) -> None:
        """Change the password.

        Raises:
            UserNotFoundError: If the user no longer exists.
            IncorrectPasswordError: If the current password does not match.
        """
        with self._uow_factory() as uow:
            user = uow.users.get_by_id(command.user_id, for_update=True)
            if user is None:
                raise UserNotFoundError(command.user_id)
            if not self._hasher.verify(command.current_password, user.password_hash):
                raise IncorrectPasswordError()
            uow.users.update_password(user.id, self._hasher.hash(command.new_password))
            record_audit(
                uow,
                context,
                action=AuditAction.UPDATE,
                resource="password",
                user_id=user.id,
                resource_id=user.id,
            )
        logger.info("Password changed: user_id=%d", command.user_id)
