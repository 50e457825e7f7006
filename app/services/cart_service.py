from decimal import Decimal
from typing import Dict, Any, Iterable, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.enums import CartStatus
from app.domain.errors import (
    BookNotFoundError,
    CartItemNotFoundError,
    CartNotFoundError,
    ConcurrentUpdateError,
    ExceedStockError,
    ProductOutOfStockError,
    QuantityInvalidError,
)
from app.repos.book_repo import BookRepo
from app.repos.cart_repo import CartRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk usera (jeden aktywny na usera).
    commands (add, update, remove, clear) modyfikuja stan + podbijaja version
    query (get) tylko odczyt
    consume_all_items / reconcile_other_carts nie commituja, sa czescia transakcji zamowienia
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.books = BookRepo(db)

    #query - odczyt
    def find_active_cart_for_user(self, user_id: int) -> CartModel:
        cart = self.repo.get_active_cart_by_user(user_id)
        if not cart:
            raise CartNotFoundError()
        return cart

    def get_my_cart(self, user_id: int) -> Dict[str, Any]:
        return self._to_view(self._get_or_create(user_id))

    #commands
    def add_item(self, user_id: int, book_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise QuantityInvalidError()

        book = self.books.get_book(book_id)
        if not book or not book.active:
            raise BookNotFoundError()

        if book.stock_quantity == 0:
            raise ProductOutOfStockError()

        cart = self._get_or_create(user_id)
        existing_item = self.repo.get_cart_item(cart.id, book_id)
        new_quantity = quantity + (existing_item.quantity if existing_item else 0)

        if new_quantity > book.stock_quantity:
            raise ExceedStockError()

        if existing_item:
            logger.info(
                f"Book {book_id} already in cart {cart.id}, quantity "
                f"{existing_item.quantity} -> {new_quantity}"
            )
            existing_item.quantity = new_quantity
        else:
            logger.info(f"Adding book {book_id} x{quantity} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, book_id=book_id, quantity=quantity)
            )

        self._bump_version(cart)
        self.repo.commit()
        return self.get_my_cart(user_id)

    def update_item_quantity(self, user_id: int, book_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise QuantityInvalidError()

        cart = self.find_active_cart_for_user(user_id)
        item = self.repo.get_cart_item(cart.id, book_id)
        if not item:
            raise CartItemNotFoundError()

        if quantity > item.book.stock_quantity:
            raise ExceedStockError()

        item.quantity = quantity
        self._bump_version(cart)
        self.repo.commit()

        logger.info(f"Cart {cart.id}: book {book_id} quantity set to {quantity}")
        return self.get_my_cart(user_id)

    def remove_item(self, user_id: int, book_id: int) -> Dict[str, Any]:
        cart = self.find_active_cart_for_user(user_id)
        item = self.repo.get_cart_item(cart.id, book_id)
        if not item:
            raise CartItemNotFoundError()

        cart.items.remove(item)
        self.repo.delete_cart_item(item)
        self._bump_version(cart)
        self.repo.commit()

        logger.info(f"Book {book_id} removed from cart {cart.id}")
        return self.get_my_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.find_active_cart_for_user(user_id)
        self.repo.delete_all_items(cart)
        self._bump_version(cart)
        self.repo.commit()
        return self.get_my_cart(user_id)

    # czesc transakcji tworzenia zamowienia
    def consume_all_items(self, cart: CartModel) -> List[CartItemModel]:
        """Drain the cart and return its items in their original order."""
        version = cart.version
        items = self.repo.delete_all_items(cart)

        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=version,
            new_data={"version": version + 1},
        )
        if rowcount == 0:
            raise ConcurrentUpdateError("Cart was modified by another operation")

        logger.info(f"Cart {cart.id} consumed ({len(items)} items)")
        return items

    def reconcile_other_carts(self, book_ids: Iterable[int], exclude_user_id: int) -> int:
        """
        Przycina ilosci w cudzych aktywnych koszykach do aktualnego stanu magazynu,
        pozycje z ksiazkami bez stanu usuwa. Zwraca liczbe zmienionych pozycji.
        """
        book_ids = sorted(set(book_ids))
        if not book_ids:
            return 0

        changed = 0
        touched_carts: dict[int, CartModel] = {}

        for item in self.repo.get_foreign_items_for_books(book_ids, exclude_user_id):
            stock = item.book.stock_quantity
            if item.quantity <= stock:
                continue

            cart = item.cart
            if stock == 0:
                logger.info(f"Reconcile: book {item.book_id} out of stock, removed from cart {cart.id}")
                cart.items.remove(item)
                self.repo.delete_cart_item(item)
            else:
                logger.info(
                    f"Reconcile: cart {cart.id} book {item.book_id} clamped {item.quantity} -> {stock}"
                )
                item.quantity = stock

            touched_carts[cart.id] = cart
            changed += 1

        for cart in touched_carts.values():
            cart.version = cart.version + 1

        self.repo.db.flush()
        return changed

    # helpers
    def _get_or_create(self, user_id: int) -> CartModel:
        existing = self.repo.get_active_cart_by_user(user_id)
        if existing:
            return existing

        try:
            created = self.repo.create_cart(
                CartModel(user_id=user_id, status=CartStatus.ACTIVE.value, version=1)
            )
            self.repo.commit()
        except IntegrityError:
            # rownolegly request zalozyl koszyk pierwszy
            self.repo.rollback()
            logger.info(f"Cart for user {user_id} created concurrently, reusing it")
            return self.find_active_cart_for_user(user_id)

        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    def _bump_version(self, cart: CartModel) -> None:
        # Optimistic locking
        # np w bazie update set version 2 where id 1 and version 1
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1},
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrentUpdateError(
                "Cart was modified by another operation"
            )

    def _to_view(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)
        total = sum((i.book.price * i.quantity for i in items), Decimal("0.00"))

        #dict przeksztalcany w jsona
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "items": [
                {
                    "book_id": i.book_id,
                    "title": i.book.title,
                    "quantity": i.quantity,
                    "price": i.book.price,
                }
                for i in items
            ],
            "total": total,
        }
