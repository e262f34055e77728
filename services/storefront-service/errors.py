"""Client-correctable checkout errors.

Every class here maps to a 400 response. Anything else raised while handling
a checkout is treated as an internal error.
"""


class CheckoutError(ValueError):
    """Base class for checkout rejections raised before any order is written."""

    reason = "invalid"


class InvalidInput(CheckoutError):
    """Empty cart or missing required customer fields."""

    reason = "invalid_input"


class UnsupportedPaymentMethod(CheckoutError):
    """Requested payment method is not enabled in the store settings."""

    reason = "unsupported_payment_method"


class InvalidProduct(CheckoutError):
    """A cart line references a product that does not exist."""

    reason = "invalid_product"

    def __init__(self, product_id: str):
        super().__init__(f"Invalid product: {product_id}")
        self.product_id = product_id
