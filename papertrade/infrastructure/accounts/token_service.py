"""
Adapter: JWT access tokens.

Implements TokenService port with PyJWT. Tokens are HMAC-signed and
carry the user id in `sub`, the role, and `iat`/`exp` timestamps.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt

from papertrade.core.config import Settings
from papertrade.domain.accounts.entities import TokenClaims, User
from papertrade.domain.accounts.errors import InvalidTokenError, TokenExpiredError
from papertrade.domain.accounts.ports import TokenService

logger = logging.getLogger(__name__)


class JwtTokenService(TokenService):
    """Issues and verifies signed JWT access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
        remember_me_days: int = 30,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(minutes=expire_minutes)
        self._remember_me_expires = timedelta(days=remember_me_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JwtTokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
            remember_me_days=settings.remember_me_expire_days,
        )

    def issue(self, user: User, remember_me: bool = False) -> str:
        now = datetime.now(timezone.utc)
        lifetime = self._remember_me_expires if remember_me else self._expires
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """Verify signature and expiry.

        Raises:
            TokenExpiredError: If `exp` has passed.
            InvalidTokenError: For any other verification failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected access token: %s", type(exc).__name__)
            raise InvalidTokenError() from exc

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc
        return TokenClaims(user_id=user_id, role=payload.get("role"))
