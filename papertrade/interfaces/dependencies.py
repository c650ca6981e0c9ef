"""
Shared FastAPI dependencies.

Resources (engine, cache, hasher, token service) are created once by
`create_app` and stored on `app.state`; these functions hand them to
routes. Authentication dependencies resolve the bearer token to a user.
"""

from functools import partial
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from papertrade.application.accounts.authenticate import AuthenticateUserUseCase
from papertrade.application.audit_trail import RequestContext
from papertrade.core.config import Settings
from papertrade.domain.accounts.entities import User
from papertrade.domain.accounts.errors import (
    AccessTokenRequiredError,
    InsufficientPermissionsError,
)
from papertrade.domain.accounts.ports import PasswordHasher, TokenService
from papertrade.domain.errors import AuthenticationError, PermissionDeniedError
from papertrade.domain.trading.ports import ProductCatalogCache
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.infrastructure.database.unit_of_work import SqlUnitOfWork

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_uow_factory(engine: Engine = Depends(get_engine)) -> UnitOfWorkFactory:
    """Return a factory that opens one SQL transaction per call."""
    return partial(SqlUnitOfWork, engine)


def get_product_cache(request: Request) -> ProductCatalogCache:
    return request.app.state.product_cache


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_request_context(request: Request) -> RequestContext:
    """Capture client details for audit entries."""
    return RequestContext(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_authenticate_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(uow_factory=uow_factory, tokens=tokens)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    use_case: AuthenticateUserUseCase = Depends(get_authenticate_use_case),
) -> User:
    """Resolve the bearer token to a user.

    Raises:
        AccessTokenRequiredError: If no bearer token was sent.
        TokenExpiredError / InvalidTokenError / UnknownTokenSubjectError:
            If the token cannot be trusted.
    """
    if credentials is None or not credentials.credentials:
        raise AccessTokenRequiredError()
    return use_case.execute(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    use_case: AuthenticateUserUseCase = Depends(get_authenticate_use_case),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers and bad tokens yield None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return use_case.execute(credentials.credentials)
    except (AuthenticationError, PermissionDeniedError):
        return None


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise InsufficientPermissionsError()
    return user
