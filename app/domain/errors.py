# app/domain/errors.py
"""Domain errors and the messages the API returns for them."""

ERROR_INVALID_REQUEST = "Invalid request"
ERROR_CART_CONFLICT = "Cart was modified concurrently, please retry"
ERROR_STORE_UNAVAILABLE = "Store unavailable"
ERROR_INTERNAL = "Internal server error"


class CartServiceError(Exception):
    """Base class for errors raised by the cart and catalog services."""


class ValidationError(CartServiceError, ValueError):
    """Malformed or missing input. Nothing was written."""


class CartConflictError(CartServiceError):
    """Optimistic write lost against another writer on every attempt."""

    def __init__(self, user_id: str):
        super().__init__(f"Concurrent modification of cart for user {user_id!r}")
        self.user_id = user_id


class StoreUnavailable(CartServiceError):
    """The database could not be reached or a statement failed."""
