"""
Use case: Resolve a bearer token to the current user.

Input: raw access token
Output: User (re-read from the database on every request)
Side effects: None.
Failure cases: TokenExpiredError, InvalidTokenError,
    UnknownTokenSubjectError when the user was deleted.
"""

from papertrade.domain.accounts.entities import User
from papertrade.domain.accounts.errors import UnknownTokenSubjectError
from papertrade.domain.accounts.ports import TokenService
from papertrade.domain.unit_of_work import UnitOfWorkFactory


class AuthenticateUserUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory, tokens: TokenService) -> None:
        self._uow_factory = uow_factory
        self._tokens = tokens

    def execute(self, token: str) -> User:
        claims = self._tokens.decode(token)
        with self._uow_factory() as uow:
            user = uow.users.get_by_id(claims.user_id)
        if user is None:
            raise UnknownTokenSubjectError(claims.user_id)
        return user
