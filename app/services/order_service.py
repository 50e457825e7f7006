# app/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.enums import (
    NotificationType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    Role,
    StockDebitPolicy,
)
from app.domain.errors import (
    BookNotFoundError,
    CartEmptyError,
    ConcurrentUpdateError,
    InvalidStatusTransitionError,
    OrderCannotBeCancelledError,
    OrderCannotChangeAddressError,
    OrderNeedReasonError,
    OrderNotFoundError,
    UnauthorizedError,
)
from app.domain.order_state import (
    ADDRESS_CHANGE_STATES,
    CANCELLABLE_STATES,
    check_order_transition,
    check_payment_transition,
)
from app.domain.schemas import OrderOut
from app.repos.book_repo import BookRepo
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.services.cart_service import CartService
from app.services.inventory_service import InventoryLedger
from app.services.lock_service import LockService, order_lock
from app.services.notification_service import NotificationService, NotificationSink
from app.utils.settings import STOCK_DEBIT_POLICY
from app.utils.logging import get_logger

logger = get_logger(__name__)

# (cel, tresc, typ) - wysylane dopiero po commicie
Outbox = List[Tuple[object, str, NotificationType]]

_STATUS_MESSAGES = {
    OrderStatus.CONFIRMED: "Your order (ID: {id}) has been confirmed.",
    OrderStatus.PROCESSING: "Your order (ID: {id}) is being processed.",
    OrderStatus.DELIVERING: (
        "Your order (ID: {id}) is out for delivery (DELIVERING) and cannot be cancelled now."
    ),
    OrderStatus.DELIVERED: "Your order (ID: {id}) has been delivered by shipper.",
}


class OrderService:
    """
    Cykl zycia zamowienia.

    - tworzenie z koszyka (jedna transakcja: stan magazynu + koszyk + zamowienie)
    - zmiany statusu wg ORDER_TRANSITIONS
    - anulowanie i zmiana adresu przez wlasciciela
    Kazda zmiana zamowienia trzyma lock w redisie i zapisuje sie przez
    UPDATE ... WHERE version = :v.
    """

    def __init__(
        self,
        db: Session,
        notifier: NotificationSink | None = None,
        lock_service: LockService | None = None,
        stock_policy: StockDebitPolicy | str = STOCK_DEBIT_POLICY,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.payments = PaymentRepo(db)
        self.books = BookRepo(db)
        self.inventory = InventoryLedger(db)
        self.carts = CartService(db)
        self.notifier = notifier or NotificationService()
        self.lock_service = lock_service or LockService()
        self.stock_policy = StockDebitPolicy(stock_policy)

    # commands

    def create_order(self, user_id: int, address: str) -> OrderOut:
        """
        Use Case: zamowienie z aktywnego koszyka usera.

        1. sprawdza koszyk (nie pusty)
        2. snapshot cen, total = suma price * qty w kolejnosci pozycji
        3. stan magazynu: sprawdzenie (ON_DELIVERING) albo zdjecie (ON_CREATION)
        4. czysci koszyk, zapisuje zamowienie, przycina cudze koszyki
        5. powiadomienia po commicie
        """
        try:
            cart = self.carts.find_active_cart_for_user(user_id)
            cart_items = list(cart.items)

            if not cart_items:
                raise CartEmptyError()

            lines = [(i.book_id, i.quantity) for i in cart_items]

            if self.stock_policy == StockDebitPolicy.ON_CREATION:
                self.inventory.reserve_all(lines)
            else:
                self.inventory.check_available(lines)

            order = OrderModel(
                user_id=user_id,
                address=address,
                status=OrderStatus.PENDING.value,
                active=True,
                version=1,
                stock_policy=self.stock_policy.value,
            )

            total = Decimal("0.00")
            for book_id, quantity in lines:
                book = self.books.get_book(book_id)
                if book is None:
                    raise BookNotFoundError()
                order.items.append(
                    OrderItemModel(book_id=book_id, quantity=quantity, price=book.price)
                )
                total += book.price * quantity

            order.total_amount = total

            self.carts.consume_all_items(cart)
            created = self.repo.create_order(order)
            self.carts.reconcile_other_carts([b for b, _ in lines], exclude_user_id=user_id)

            self.repo.commit()
        except Exception as e:
            logger.warning(f"Create order for user {user_id} rolled back: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Order {created.id} created for user {user_id}, total {total}")

        content = f"New order placed by user {user_id}. Order ID: {created.id}"
        self._send(
            [
                (Role.STAFF, content, NotificationType.FOR_STAFFS),
                (Role.ADMIN, content, NotificationType.FOR_ADMINS),
                (
                    user_id,
                    f"Your order (ID: {created.id}) has been created and is now pending for confirmation.",
                    NotificationType.FOR_CUSTOMERS_PERSONAL,
                ),
            ]
        )

        return self.get_order(created.id)

    def update_order_status(self, order_id: int, new_status: OrderStatus | str) -> OrderOut:
        new_status = OrderStatus(new_status)

        with self._order_lock(order_id):
            order = self._get_order_model(order_id)
            current = OrderStatus(order.status)

            # anulowanie tylko przez cancel_order (powod + wlasciciel)
            if new_status == OrderStatus.CANCELLED and current != new_status:
                raise InvalidStatusTransitionError(
                    f"Invalid order status transition {current.value} -> CANCELLED"
                )

            check_order_transition(current, new_status)

            try:
                if new_status == OrderStatus.DELIVERING:
                    self._on_delivering(order)
                elif new_status == OrderStatus.DELIVERED:
                    self._on_delivered(order)

                self._write(order, {"status": new_status.value})
                self.repo.commit()
            except Exception as e:
                logger.warning(f"Order {order_id} {current.value} -> {new_status.value} rolled back: {e}")
                self.repo.rollback()
                raise

        logger.info(f"Order {order_id}: {current.value} -> {new_status.value}")

        self._send(
            [
                (
                    order.user_id,
                    _STATUS_MESSAGES[new_status].format(id=order_id),
                    NotificationType.FOR_CUSTOMERS_PERSONAL,
                )
            ]
        )
        return self.get_order(order_id)

    def cancel_order(self, order_id: int, user_id: int, reason: str | None) -> OrderOut:
        with self._order_lock(order_id):
            order = self._get_order_model(order_id)

            if order.user_id != user_id:
                raise UnauthorizedError()

            if OrderStatus(order.status) not in CANCELLABLE_STATES:
                raise OrderCannotBeCancelledError()

            if not reason or not reason.strip():
                raise OrderNeedReasonError()

            refunding = False
            try:
                if StockDebitPolicy(order.stock_policy) == StockDebitPolicy.ON_CREATION:
                    self.inventory.release_all([(i.book_id, i.quantity) for i in order.items])

                payment = self.payments.get_by_order(order.id)
                if payment is not None and payment.status == PaymentStatus.SUCCESS.value:
                    check_payment_transition(PaymentStatus.SUCCESS, PaymentStatus.REFUNDING)
                    payment.status = PaymentStatus.REFUNDING.value
                    refunding = True

                self._write(
                    order,
                    {"status": OrderStatus.CANCELLED.value, "cancel_reason": reason.strip()},
                )
                self.repo.commit()
            except Exception as e:
                logger.warning(f"Cancel order {order_id} rolled back: {e}")
                self.repo.rollback()
                raise

        logger.info(f"Order {order_id} cancelled by user {user_id} (refunding={refunding})")

        if refunding:
            staff_content = (
                f"Order ID: {order_id} has been cancelled by the customer {user_id}. "
                "The order had a successful payment, please process the refund."
            )
        else:
            staff_content = f"Order ID: {order_id} has been cancelled by the customer {user_id}."

        self._send(
            [
                (Role.STAFF, staff_content, NotificationType.FOR_STAFFS),
                (Role.ADMIN, staff_content, NotificationType.FOR_ADMINS),
                (
                    user_id,
                    f"Your order (ID: {order_id}) has been cancelled successfully.",
                    NotificationType.FOR_CUSTOMERS_PERSONAL,
                ),
            ]
        )
        return self.get_order(order_id)

    def change_order_address(self, order_id: int, user_id: int, new_address: str) -> OrderOut:
        with self._order_lock(order_id):
            order = self._get_order_model(order_id)

            if order.user_id != user_id:
                raise UnauthorizedError()

            if OrderStatus(order.status) not in ADDRESS_CHANGE_STATES:
                raise OrderCannotChangeAddressError()

            try:
                self._write(order, {"address": new_address})
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Order {order_id} address changed by user {user_id}")

        content = f"Order ID: {order_id} address has been changed by the customer {user_id}"
        self._send(
            [
                (Role.STAFF, content, NotificationType.FOR_STAFFS),
                (Role.ADMIN, content, NotificationType.FOR_ADMINS),
                (
                    user_id,
                    f"Your order (ID: {order_id}) address has been changed successfully.",
                    NotificationType.FOR_CUSTOMERS_PERSONAL,
                ),
            ]
        )
        return self.get_order(order_id)

    def deactivate_order(self, order_id: int) -> None:
        """Soft delete. Zamowienia nigdy nie sa usuwane z bazy."""
        with self._order_lock(order_id):
            order = self._get_order_model(order_id)
            try:
                self._write(order, {"active": False})
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Order {order_id} deactivated")

    # queries

    def get_order(self, order_id: int) -> OrderOut:
        return OrderOut.model_validate(self._get_order_model(order_id))

    def list_orders(
        self,
        user_id: int | None = None,
        status: OrderStatus | str | None = None,
    ) -> List[OrderOut]:
        status_value = OrderStatus(status).value if status is not None else None
        return [
            OrderOut.model_validate(o)
            for o in self.repo.list_orders(user_id=user_id, status=status_value)
        ]

    # side effects przejsc

    def _on_delivering(self, order: OrderModel) -> None:
        if StockDebitPolicy(order.stock_policy) != StockDebitPolicy.ON_DELIVERING:
            return

        # sprawdzane na aktualnym stanie, nie na snapshocie z tworzenia
        lines = [(i.book_id, i.quantity) for i in order.items]
        self.inventory.reserve_all(lines)
        self.carts.reconcile_other_carts([b for b, _ in lines], exclude_user_id=order.user_id)

    def _on_delivered(self, order: OrderModel) -> None:
        payment = self.payments.get_by_order(order.id)
        if payment is not None and payment.method == PaymentMethod.COD.value:
            payment.status = PaymentStatus.SUCCESS.value
            payment.paid_at = datetime.now(timezone.utc)
            logger.info(f"COD payment {payment.id} settled on delivery of order {order.id}")

    # helpers

    def _get_order_model(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError()
        return order

    def _write(self, order: OrderModel, new_data: dict) -> None:
        # Optimistic locking, update ... where version = :old
        self.db.flush()
        rowcount = self.repo.update_order_version(
            order_id=order.id,
            old_version=order.version,
            new_data=new_data,
        )
        if rowcount == 0:
            raise ConcurrentUpdateError("Order was modified by another operation")

    def _order_lock(self, order_id: int):
        return order_lock(self.lock_service, order_id)

    def _send(self, outbox: Outbox) -> None:
        for target, content, ntype in outbox:
            self.notifier.notify(target, content, ntype)
