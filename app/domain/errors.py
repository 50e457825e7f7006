"""Typed failures raised by the service layer.

Every error carries a numeric ``code`` (stable, shown to API clients) and the
HTTP ``status_code`` the routers translate it to.
"""


class AppError(Exception):
    """Base exception for all bookstore errors."""

    code = 9999
    status_code = 400
    message = "Uncategorized exception occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


# --- families ---------------------------------------------------------------

class NotFoundError(AppError, LookupError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InvalidTransitionError(AppError):
    status_code = 400


class UnauthorizedError(AppError, PermissionError):
    code = 401
    status_code = 403
    message = "Unauthorized action"


class ValidationError(AppError, ValueError):
    status_code = 400


class EmptyStateError(AppError):
    """Nothing stored yet. Callers treat this as an empty result, not a crash."""

    status_code = 404


class InsufficientStockError(AppError):
    code = 1402
    status_code = 409
    message = "Insufficient stock for one or more items"

    def __init__(self, book_id: int | None = None, requested: int | None = None):
        self.book_id = book_id
        self.requested = requested
        msg = None
        if book_id is not None:
            msg = f"Insufficient stock for book {book_id} (requested {requested})"
        super().__init__(msg)


# --- not found --------------------------------------------------------------

class UserNotFoundError(NotFoundError):
    code = 1002
    message = "User not found"


class BookNotFoundError(NotFoundError):
    code = 3002
    message = "Book not found"


class CartNotFoundError(NotFoundError):
    code = 8001
    message = "Cart not found"


class CartItemNotFoundError(NotFoundError):
    code = 8002
    message = "Cart item not found"


class PromotionNotFoundError(NotFoundError):
    code = 11001
    message = "Promotion not found"


class OrderNotFoundError(NotFoundError):
    code = 1403
    message = "Order not found"


class PaymentNotFoundError(NotFoundError):
    code = 1502
    message = "Payment not found"


class NotificationNotFoundError(NotFoundError):
    code = 1601
    message = "Notification not found"


# --- conflicts --------------------------------------------------------------

class DuplicateStatusUpdateError(ConflictError):
    code = 1406
    message = "New status must be different from current status"


class PaymentAlreadyExistsError(ConflictError):
    code = 1501
    message = "Payment already exists for this order"


class PromotionContentExistsError(ConflictError):
    code = 11003
    message = "Promotion content already exists"


class ConcurrentUpdateError(ConflictError):
    code = 409
    message = "Resource was modified by another operation"


# --- state machine ----------------------------------------------------------

class InvalidStatusTransitionError(InvalidTransitionError):
    code = 1410
    message = "Invalid order status transition"


class OrderCannotBeCancelledError(InvalidTransitionError):
    code = 1404
    message = "Order cannot be cancelled"


class OrderCannotChangeAddressError(InvalidTransitionError):
    code = 1411
    message = "Cannot change address (only PENDING orders can change address)"


class OrderCancelledError(InvalidTransitionError):
    code = 1407
    message = "Order has been cancelled"


class InvalidPaymentStatusTransitionError(InvalidTransitionError):
    code = 1503
    message = "Invalid payment status transition"


# --- validation -------------------------------------------------------------

class CartEmptyError(ValidationError):
    code = 1401
    message = "Cart is empty"


class OrderNeedReasonError(ValidationError):
    code = 1409
    message = "Reason is required for cancelling order"


class QuantityInvalidError(ValidationError):
    code = 8006
    message = "Quantity must be at least 1"


class ExceedStockError(ValidationError):
    code = 8004
    message = "Requested quantity exceeds available stock"


class ProductOutOfStockError(ValidationError):
    code = 8005
    message = "Product is out of stock"


class InvalidDateRangeError(ValidationError):
    code = 11002
    message = "Invalid date range"


# --- empty state ------------------------------------------------------------

class NoOrdersStoredError(EmptyStateError):
    code = 1412
    message = "No orders stored in database"


class NoUsersStoredError(EmptyStateError):
    code = 1003
    message = "No users stored in database"
