"""
Domain-specific errors for the accounts bounded context.

These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from papertrade.domain.errors import (
    AuthenticationError,
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
)


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering with an email that is already in use."""

    def __init__(self, email: str) -> None:
        super().__init__("User with this email already exists")
        self.email = email


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class AccessTokenRequiredError(AuthenticationError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self) -> None:
        super().__init__("Access token required")


class TokenExpiredError(AuthenticationError):
    """Raised when a bearer token has passed its expiry."""

    def __init__(self) -> None:
        super().__init__("Token expired")


class UnknownTokenSubjectError(AuthenticationError):
    """Raised when a valid token names a user that no longer exists."""

    def __init__(self, user_id: int) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class InvalidTokenError(PermissionDeniedError):
    """Raised when a bearer token fails signature or claim checks."""

    def __init__(self) -> None:
        super().__init__("Invalid token")


class InsufficientPermissionsError(PermissionDeniedError):
    """Raised when a user lacks the role a route requires."""

    def __init__(self) -> None:
        super().__init__("Insufficient permissions")


class IncorrectPasswordError(InvalidOperationError):
    """Raised when a password change supplies the wrong current password."""

    def __init__(self) -> None:
        super().__init__("Current password is incorrect")


class KycAlreadySubmittedError(ConflictError):
    """Raised when a user submits KYC details a second time."""

    def __init__(self, user_id: int) -> None:
        super().__init__("KYC already submitted")
        self.user_id = user_id


class DuplicatePanNumberError(ConflictError):
    """Raised when a PAN number is already registered to another user."""

    def __init__(self) -> None:
        super().__init__("PAN number already registered")


class NegativeWalletBalanceError(InvalidOperationError):
    """Raised when an admin adjustment would overdraw a wallet."""

    def __init__(self, balance: str, amount: str) -> None:
        super().__init__(
            f"Wallet adjustment would make balance negative: balance {balance}, amount {amount}"
        )
        self.balance = balance
        self.amount = amount
