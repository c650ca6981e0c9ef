"""
Domain-specific errors for the trading bounded context.

All errors raised from the trading domain are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from papertrade.domain.errors import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
)


class ProductNotFoundError(NotFoundError):
    """Raised when a product id is not in the catalog."""

    def __init__(self, product_id: int) -> None:
        super().__init__("Product not found")
        self.product_id = product_id


class DuplicateProductError(ConflictError):
    """Raised when a product name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Product already exists: {name}")
        self.name = name


class InsufficientFundsError(BusinessRuleError):
    """Raised when the wallet cannot cover a purchase."""

    def __init__(self, required: str, available: str) -> None:
        super().__init__(
            f"Insufficient wallet balance: required {required}, available {available}"
        )
        self.required = required
        self.available = available


class InsufficientHoldingsError(BusinessRuleError):
    """Raised when a sell exceeds the units held."""

    def __init__(self, requested: str, held: str) -> None:
        super().__init__(
            f"Insufficient quantity in portfolio: requested {requested}, held {held}"
        )
        self.requested = requested
        self.held = held


class AlreadyInWatchlistError(BusinessRuleError):
    """Raised when a product is added to a watchlist twice."""

    def __init__(self, product_id: int) -> None:
        super().__init__("Product already in watchlist")
        self.product_id = product_id


class LimitPriceNotMetError(BusinessRuleError):
    """Raised when a limit order cannot fill at the current price."""

    def __init__(self, order_price: str, current_price: str) -> None:
        super().__init__(
            f"Limit price {order_price} not met at current price {current_price}"
        )
        self.order_price = order_price
        self.current_price = current_price


class TradeTooSmallError(BusinessRuleError):
    """Raised when a trade is worth less than one cent after rounding."""

    def __init__(self, units: str, price: str) -> None:
        super().__init__(
            f"Trade value too small: {units} units at {price} is below 0.01"
        )
        self.units = units
        self.price = price
