# app/repos/cart_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.enums import CartStatus


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_active_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(
                CartModel.user_id == user_id,
                CartModel.status == CartStatus.ACTIVE.value,
            )
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_cart_item(self, cart_id: int, book_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.book_id == book_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_all_items(self, cart: CartModel) -> list[CartItemModel]:
        # delete-orphan na relacji usuwa wiersze przy flush
        removed = list(cart.items)
        cart.items.clear()
        self.db.flush()
        return removed

    def get_foreign_items_for_books(self, book_ids: list[int], exclude_user_id: int) -> list[CartItemModel]:
        # pozycje w aktywnych koszykach innych userow z danymi ksiazkami
        return list(
            self.db.execute(
                select(CartItemModel)
                .join(CartModel, CartItemModel.cart_id == CartModel.id)
                .where(
                    CartModel.status == CartStatus.ACTIVE.value,
                    CartModel.user_id != exclude_user_id,
                    CartItemModel.book_id.in_(book_ids),
                )
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # update carts set version = old + 1 where id = :id and version = :old
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        cart = self.db.get(CartModel, cart_id)
        if cart is not None:
            self.db.expire(cart, list(new_data.keys()))
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
