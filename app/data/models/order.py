from sqlalchemy import Boolean, Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base
from app.domain.enums import OrderStatus, StockDebitPolicy


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    total_amount = Column(Numeric(12, 2), nullable=False)
    address = Column(String(255), nullable=False)
    cancel_reason = Column(String(500), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False, default=1)
    # polityka z chwili zlozenia, zmiana ustawienia nie dotyczy zlozonych zamowien
    stock_policy = Column(String(20), nullable=False, default=StockDebitPolicy.ON_DELIVERING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    payment = relationship("PaymentModel", back_populates="order", uselist=False)
