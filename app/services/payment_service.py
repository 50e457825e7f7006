# app/services/payment_service.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from app.data.models.payment import PaymentModel
from app.domain.enums import OrderStatus, PaymentMethod, PaymentStatus
from app.domain.errors import (
    ConcurrentUpdateError,
    OrderCancelledError,
    OrderNotFoundError,
    PaymentAlreadyExistsError,
    PaymentNotFoundError,
    UnauthorizedError,
)
from app.domain.order_state import check_payment_transition
from app.domain.schemas import PaymentOut
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.services.currency import CurrencyConverter
from app.services.lock_service import LockService, order_lock
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Platnosc 1:1 z zamowieniem.
    COD -> SUCCESS od razu, reszta PENDING do potwierdzenia (mark_payment_done).
    SUCCESS -> REFUNDING robi tylko anulowanie zamowienia (OrderService).
    Zmiany trzymaja ten sam lock zamowienia co OrderService.
    """

    def __init__(
        self,
        db: Session,
        converter: CurrencyConverter | None = None,
        lock_service: LockService | None = None,
    ):
        self.db = db
        self.repo = PaymentRepo(db)
        self.orders = OrderRepo(db)
        self.converter = converter or CurrencyConverter()
        self.lock_service = lock_service or LockService()

    def create_payment(self, order_id: int, user_id: int, method: PaymentMethod | str) -> PaymentOut:
        method = PaymentMethod(method)

        with order_lock(self.lock_service, order_id):
            self.db.expire_all()

            order = self.orders.get_order(order_id)
            if not order:
                raise OrderNotFoundError()

            if order.user_id != user_id:
                raise UnauthorizedError()

            if self.repo.exists_for_order(order_id):
                raise PaymentAlreadyExistsError()

            if order.status == OrderStatus.CANCELLED.value:
                raise OrderCancelledError()

            now = datetime.now(timezone.utc)
            payment = PaymentModel(
                order_id=order.id,
                method=method.value,
                status=PaymentStatus.PENDING.value,
                amount=self.converter.convert(order.total_amount),
                created_at=now,
            )

            if method == PaymentMethod.COD:
                payment.status = PaymentStatus.SUCCESS.value
                payment.paid_at = now

            try:
                created = self.repo.create_payment(payment)
                if method == PaymentMethod.COD and order.status == OrderStatus.PENDING_PAYMENT.value:
                    self._write_order_status(order, OrderStatus.PENDING)
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Payment created for order {order_id}: {created.method} - {created.status}")
        return PaymentOut.model_validate(created)

    def mark_payment_done(self, payment_id: int) -> PaymentOut:
        order_id = self._get(payment_id).order_id

        with order_lock(self.lock_service, order_id):
            # stan sprzed wziecia locka moze byc nieaktualny
            self.db.expire_all()
            payment = self._get(payment_id)

            if payment.order.status == OrderStatus.CANCELLED.value:
                raise OrderCancelledError()

            check_payment_transition(payment.status, PaymentStatus.SUCCESS)

            payment.status = PaymentStatus.SUCCESS.value
            payment.paid_at = datetime.now(timezone.utc)
            self.repo.commit()

        logger.info(f"Payment {payment_id} marked as done")
        return PaymentOut.model_validate(payment)

    def complete_refund(self, payment_id: int) -> PaymentOut:
        order_id = self._get(payment_id).order_id

        with order_lock(self.lock_service, order_id):
            self.db.expire_all()
            payment = self._get(payment_id)
            check_payment_transition(payment.status, PaymentStatus.REFUNDED)

            payment.status = PaymentStatus.REFUNDED.value
            self.repo.commit()

        logger.info(f"Payment {payment_id} refunded")
        return PaymentOut.model_validate(payment)

    # queries

    def get_payment(self, payment_id: int) -> PaymentOut:
        return PaymentOut.model_validate(self._get(payment_id))

    def get_payment_by_order(self, order_id: int) -> PaymentOut:
        payment = self.repo.get_by_order(order_id)
        if payment is None:
            raise PaymentNotFoundError()
        return PaymentOut.model_validate(payment)

    def list_payments(
        self,
        user_id: int | None = None,
        status: PaymentStatus | str | None = None,
    ) -> List[PaymentOut]:
        status_value = PaymentStatus(status).value if status is not None else None
        return [
            PaymentOut.model_validate(p)
            for p in self.repo.list_payments(user_id=user_id, status=status_value)
        ]

    def _get(self, payment_id: int) -> PaymentModel:
        payment = self.repo.get_payment(payment_id)
        if payment is None:
            raise PaymentNotFoundError()
        return payment

    def _write_order_status(self, order, status: OrderStatus) -> None:
        # ten sam optimistic lock co w OrderService
        self.db.flush()
        rowcount = self.orders.update_order_version(
            order_id=order.id,
            old_version=order.version,
            new_data={"status": status.value},
        )
        if rowcount == 0:
            raise ConcurrentUpdateError("Order was modified by another operation")
