# app/repos/order_repo.py
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return (
            select(OrderModel)
            .where(OrderModel.active.is_(True))
            .options(selectinload(OrderModel.items), selectinload(OrderModel.payment))
        )

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            self._active().where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, user_id: int | None = None, status: str | None = None) -> list[OrderModel]:
        stmt = self._active()
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(OrderModel.status == status)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_active_orders(self) -> list[OrderModel]:
        return list(
            self.db.execute(self._active().order_by(OrderModel.id)).scalars().all()
        )

    def count_orders(self) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.active.is_(True))
        ).scalar_one()

    def delivered_items(self, delivered_status: str) -> list[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
                .where(OrderModel.active.is_(True), OrderModel.status == delivered_status)
                .order_by(OrderItemModel.id)
            ).scalars().all()
        )

    def update_order_version(self, order_id: int, old_version: int, new_data: dict) -> int:
        # optimistic locking na kolumnie version
        values = dict(new_data)
        values["version"] = old_version + 1
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.version == old_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        order = self.db.get(OrderModel, order_id)
        if order is not None:
            self.db.expire(order, list(values.keys()))
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
