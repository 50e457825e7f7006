# app/domain/order_state.py
from app.domain.enums import OrderStatus, PaymentStatus
from app.domain.errors import (
    DuplicateStatusUpdateError,
    InvalidPaymentStatusTransitionError,
    InvalidStatusTransitionError,
)

# PENDING_PAYMENT/PENDING -> CONFIRMED -> PROCESSING -> DELIVERING -> DELIVERED
# CANCELLED tylko przez cancel_order, nie przez zmiane statusu
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING_PAYMENT: frozenset({OrderStatus.CONFIRMED}),
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.DELIVERING}),
    OrderStatus.DELIVERING: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

CANCELLABLE_STATES = frozenset(
    {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}
)
ADDRESS_CHANGE_STATES = frozenset({OrderStatus.PENDING})
TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.SUCCESS}),
    PaymentStatus.SUCCESS: frozenset({PaymentStatus.REFUNDING}),
    PaymentStatus.REFUNDING: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
}


def check_order_transition(current: OrderStatus, target: OrderStatus) -> None:
    """Raise unless ``current -> target`` is an edge of the order lifecycle."""
    current, target = OrderStatus(current), OrderStatus(target)

    if current == target:
        raise DuplicateStatusUpdateError()

    if target not in ORDER_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(
            f"Invalid order status transition {current.value} -> {target.value}"
        )


def check_payment_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    current, target = PaymentStatus(current), PaymentStatus(target)

    if target not in PAYMENT_TRANSITIONS[current]:
        raise InvalidPaymentStatusTransitionError(
            f"Invalid payment status transition {current.value} -> {target.value}"
        )
