# app/repos/payment_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_payment(self, payment_id: int) -> PaymentModel | None:
        return self.db.get(PaymentModel, payment_id)

    def get_by_order(self, order_id: int) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.order_id == order_id)
        ).scalar_one_or_none()

    def exists_for_order(self, order_id: int) -> bool:
        return self.get_by_order(order_id) is not None

    def list_payments(self, user_id: int | None = None, status: str | None = None) -> list[PaymentModel]:
        stmt = select(PaymentModel)
        if user_id is not None:
            stmt = stmt.join(OrderModel, PaymentModel.order_id == OrderModel.id).where(
                OrderModel.user_id == user_id
            )
        if status is not None:
            stmt = stmt.where(PaymentModel.status == status)
        return list(self.db.execute(stmt.order_by(PaymentModel.id)).scalars().all())

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
