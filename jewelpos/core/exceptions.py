"""
Domain exceptions for the JewelPOS application.

Every failure a checkout, conversion or return can report is one of these.
"""

from typing import Any


class POSError(Exception):
    """Base exception for all JewelPOS errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class InvalidInputError(POSError):
    """Input failed validation before any write."""

    def __init__(
        self,
        field: str,
        message: str,
        value: Any = None,
        code: str = "INVALID_INPUT",
    ):
        super().__init__(
            f"Invalid input for '{field}': {message}",
            code=code,
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class EmptyCartError(InvalidInputError):
    """Checkout attempted with no cart lines."""

    def __init__(self):
        super().__init__(
            field="items",
            message="cart is empty",
            code="EMPTY_CART",
        )


class MissingCustomerError(InvalidInputError):
    """A memo was requested without a customer."""

    def __init__(self, document_type: str = "memo"):
        super().__init__(
            field="customer_id",
            message=f"a customer is required for a {document_type}",
            code="MISSING_CUSTOMER",
        )


class ProductNotFoundError(InvalidInputError):
    """Cart references a product that does not exist."""

    def __init__(self, product_id: str):
        super().__init__(
            field="product_id",
            message=f"product not found: {product_id}",
            value=product_id,
            code="PRODUCT_NOT_FOUND",
        )
        self.product_id = product_id


class CustomerNotFoundError(InvalidInputError):
    """Request references a customer that does not exist."""

    def __init__(self, customer_id: str):
        super().__init__(
            field="customer_id",
            message=f"customer not found: {customer_id}",
            value=customer_id,
            code="CUSTOMER_NOT_FOUND",
        )


# Conflict Exceptions
class ConflictError(POSError):
    """Request conflicts with the current state of stored data."""

    pass


class InsufficientStockError(ConflictError):
    """Requested quantity exceeds available stock."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidStateError(ConflictError):
    """Operation is not allowed from the document's current state."""

    def __init__(self, entity_id: int | str, current: str | None, operation: str):
        super().__init__(
            f"Cannot {operation} document {entity_id} in state '{current}'",
            code="INVALID_STATE",
            details={
                "entity_id": entity_id,
                "current": current,
                "operation": operation,
            },
        )


class DuplicateInvoiceNumberError(ConflictError):
    """Invoice number already in use."""

    retryable = True

    def __init__(self, invoice_number: str):
        super().__init__(
            f"Invoice number already exists: {invoice_number}",
            code="DUPLICATE_INVOICE_NUMBER",
            details={"invoice_number": invoice_number},
        )
        self.invoice_number = invoice_number


class ReconciliationPendingError(ConflictError):
    """An earlier conversion wrote its invoice header but never finished.

    The memo is still open, so the derived invoice number is taken by an
    incomplete invoice that needs reconciliation before a retry can succeed.
    """

    def __init__(self, memo_id: int, invoice_number: str, current: str | None):
        super().__init__(
            f"Memo {memo_id} has an unfinished conversion ({invoice_number}) "
            "awaiting reconciliation",
            code="RECONCILIATION_PENDING",
            details={
                "memo_id": memo_id,
                "invoice_number": invoice_number,
                "current": current,
            },
        )
        self.invoice_number = invoice_number


# Authentication Exceptions
class UnauthenticatedError(POSError):
    """No authenticated actor is available."""

    def __init__(self, reason: str = "no authenticated actor"):
        super().__init__(
            f"Authentication required: {reason}",
            code="UNAUTHENTICATED",
            details={"reason": reason},
        )


# Storage Exceptions
class StorageError(POSError):
    """Base exception for storage operations."""

    pass


class SaleNotFoundError(StorageError):
    """Sale document not found in storage."""

    def __init__(self, sale_id: int):
        super().__init__(
            f"Sale document not found: {sale_id}",
            code="SALE_NOT_FOUND",
            details={"sale_id": sale_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class StorageFailureError(StorageError):
    """A write failed after the document header was persisted.

    The document is left in ``pending`` commit status and needs
    reconciliation.
    """

    def __init__(self, step: str, sale_id: int | None, error: str):
        super().__init__(
            f"Storage failure at step '{step}' for sale {sale_id}: {error}",
            code="STORAGE_FAILURE",
            details={"step": step, "sale_id": sale_id, "error": error},
        )
        self.step = step
        self.sale_id = sale_id


# Notification Exceptions
class NotificationDeliveryError(POSError):
    """A notification could not be delivered."""

    retryable = True

    def __init__(self, channel: str, recipient: str, reason: str):
        super().__init__(
            f"Failed to deliver {channel} notification to {recipient}: {reason}",
            code="NOTIFICATION_FAILED",
            details={"channel": channel, "recipient": recipient, "reason": reason},
        )


class ConfigurationError(POSError):
    """Configuration error."""

    pass

