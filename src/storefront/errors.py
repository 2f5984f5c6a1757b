"""Business outcomes surfaced by storefront operations.

Field-level rules raise ``protean.exceptions.ValidationError`` from inside
the model; everything here describes the outcome of an operation and is
translated to a response by ``storefront.api.errors``.
"""


class StorefrontError(Exception):
    """Base class for storefront errors."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: list[str] | None = None):
        self.message = message
        self.details = details or []
        super().__init__(message)


class Unauthenticated(StorefrontError):
    code = "UNAUTHENTICATED"


class Forbidden(StorefrontError):
    code = "FORBIDDEN"


class NotFound(StorefrontError):
    code = "NOT_FOUND"


class ProductUnavailable(StorefrontError):
    """The product exists but is not purchasable."""

    code = "UNAVAILABLE"

    def __init__(self, product_id: str, message: str | None = None):
        self.product_id = product_id
        super().__init__(message or f"Product {product_id} is not available")


class InsufficientStock(StorefrontError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: int, available: int, message: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(message or f"Only {available} units of product {product_id} available")


class ValidationFailed(StorefrontError):
    """Input or cart-wide inconsistency. ``details`` holds every reason found."""

    code = "VALIDATION_FAILED"

    def __init__(self, reasons: list[str] | str, message: str | None = None):
        if isinstance(reasons, str):
            reasons = [reasons]
        super().__init__(message or reasons[0], details=list(reasons))

    @property
    def reasons(self) -> list[str]:
        return self.details


class OrderNumberExhausted(StorefrontError):
    code = "ORDER_NUMBER_EXHAUSTED"

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__("Failed to generate unique order number")


class StorageTimeout(StorefrontError):
    code = "STORAGE_TIMEOUT"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("The storage backend did not respond in time")


class StorageUnavailable(StorefrontError):
    code = "STORAGE_UNAVAILABLE"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("The storage backend is unavailable")
