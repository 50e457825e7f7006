#app/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.domain.enums import CartStatus


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=CartStatus.ACTIVE.value)
    version = Column(Integer, nullable=False, default=1)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    # jeden aktywny koszyk na usera (CartStatus ma tylko ACTIVE)
    __table_args__ = (UniqueConstraint("user_id", name="u_cart_user"),)
