# app/services/inventory_service.py
from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from app.domain.errors import BookNotFoundError, InsufficientStockError
from app.repos.book_repo import BookRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

StockLine = Tuple[int, int]  # (book_id, quantity)


class InventoryLedger:
    """
    Stan magazynowy ksiazek.
    - reserve: warunkowy UPDATE (stock >= qty), brak read-then-write
    - release: zawsze oddaje qty
    Nie commituje, transakcja nalezy do wywolujacego serwisu.
    """

    def __init__(self, db: Session):
        self.repo = BookRepo(db)

    def reserve(self, book_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")

        if self.repo.debit_stock(book_id, quantity) == 0:
            if self.repo.get_book(book_id) is None:
                raise BookNotFoundError()
            logger.info(f"Reserve rejected: book {book_id}, qty {quantity}")
            raise InsufficientStockError(book_id, quantity)

        logger.info(f"Reserved {quantity} of book {book_id}")

    def release(self, book_id: int, quantity: int) -> None:
        if self.repo.credit_stock(book_id, quantity) == 0:
            raise BookNotFoundError()
        logger.info(f"Released {quantity} of book {book_id}")

    def reserve_all(self, lines: Iterable[StockLine]) -> None:
        """Reserve every line or none: on failure the lines already debited are released."""
        done: list[StockLine] = []
        try:
            for book_id, quantity in lines:
                self.reserve(book_id, quantity)
                done.append((book_id, quantity))
        except Exception:
            for book_id, quantity in reversed(done):
                self.release(book_id, quantity)
            raise

    def release_all(self, lines: Iterable[StockLine]) -> None:
        for book_id, quantity in lines:
            self.release(book_id, quantity)

    def check_available(self, lines: list[StockLine]) -> None:
        # fail fast bez zmiany stanu (wiersze zablokowane FOR UPDATE)
        books = self.repo.get_books_for_update([book_id for book_id, _ in lines])
        for book_id, quantity in lines:
            book = books.get(book_id)
            if book is None:
                raise BookNotFoundError()
            if book.stock_quantity < quantity:
                raise InsufficientStockError(book_id, quantity)

    def available(self, book_id: int) -> int:
        book = self.repo.get_book(book_id)
        if book is None:
            raise BookNotFoundError()
        return book.stock_quantity
