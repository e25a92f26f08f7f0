from typing import List, Optional


class StorefrontError(Exception):
    """
    Base class of every failure a storefront handler reports back to its caller.

    `code` is a stable machine-readable tag; the message (str(exc)) is meant to
    be shown to the shopper as-is.
    """

    code = "unknown"
    default_message = "An unknown error occurred."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class Unauthorized(StorefrontError):
    code = "unauthorized"
    default_message = "Login required."


class Forbidden(StorefrontError):
    code = "forbidden"
    default_message = "You do not have access to this item."


class NotFound(StorefrontError):
    code = "not_found"
    default_message = "Not found."


class ProductInactive(StorefrontError):
    code = "inactive"
    default_message = "This product is no longer on sale."


class InvalidQuantity(StorefrontError):
    code = "invalid_quantity"
    default_message = "Quantity must be at least 1."


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"
    default_message = "Not enough stock."

    def __init__(self, message: Optional[str] = None, items: Optional[List[str]] = None):
        super().__init__(message)
        # "NAME (current stock: N)" for every offending product
        self.items = items or []


class EmptyCart(StorefrontError):
    code = "empty_cart"
    default_message = "Your cart is empty."


class CartUpdateFailed(StorefrontError):
    code = "cart_update_failed"
    default_message = "Failed to update the cart."


class OrderFailed(StorefrontError):
    code = "order_failed"
    default_message = "Failed to create the order."
