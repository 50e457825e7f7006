# app/repos/book_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.util import identity_key

from app.data.models.book import BookModel


class BookRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_book(self, book_id: int) -> BookModel | None:
        return self.db.get(BookModel, book_id)

    def get_books_for_update(self, book_ids: list[int]) -> dict[int, BookModel]:
        # SELECT ... FOR UPDATE (na sqlite ignorowane)
        rows = self.db.execute(
            select(BookModel)
            .where(BookModel.id.in_(book_ids))
            .order_by(BookModel.id)
            .with_for_update()
        ).scalars().all()
        return {b.id: b for b in rows}

    def list_active_books(self) -> list[BookModel]:
        return list(
            self.db.execute(
                select(BookModel).where(BookModel.active.is_(True)).order_by(BookModel.id)
            ).scalars().all()
        )

    def add_book(self, book: BookModel) -> BookModel:
        self.db.add(book)
        self.db.flush()
        return book

    def debit_stock(self, book_id: int, quantity: int) -> int:
        """Atomic conditional decrement. Returns the affected row count (0 or 1)."""
        result = self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id, BookModel.stock_quantity >= quantity)
            .values(stock_quantity=BookModel.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(book_id)
        return result.rowcount

    def credit_stock(self, book_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id)
            .values(stock_quantity=BookModel.stock_quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(book_id)
        return result.rowcount

    def _expire_stock(self, book_id: int) -> None:
        # obiekt w identity map ma stara wartosc po UPDATE z pominieciem ORM
        book = self.db.identity_map.get(identity_key(BookModel, book_id))
        if book is not None:
            self.db.expire(book, ["stock_quantity"])

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
