# app/services/book_service.py
import random
from typing import List

from sqlalchemy.orm import Session

from app.data.models.book import BookModel
from app.domain.errors import BookNotFoundError
from app.domain.schemas import BookCreate, BookOut, BookUpdate
from app.repos.book_repo import BookRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class BookService:
    def __init__(self, db: Session):
        self.repo = BookRepo(db)

    def create_book(self, payload: BookCreate) -> BookOut:
        book = self.repo.add_book(BookModel(**payload.model_dump()))
        self.repo.commit()
        logger.info(f"Book {book.id} created")
        return BookOut.model_validate(book)

    def get_book(self, book_id: int) -> BookOut:
        return BookOut.model_validate(self._get(book_id))

    def list_active_books(self) -> List[BookOut]:
        return [BookOut.model_validate(b) for b in self.repo.list_active_books()]

    def update_book(self, book_id: int, payload: BookUpdate) -> BookOut:
        # zmiana ceny nie rusza cen w zlozonych zamowieniach (snapshot w order_items)
        book = self._get(book_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(book, field, value)
        self.repo.commit()
        return BookOut.model_validate(book)

    def sample_active_books(self, n: int, seed: int | None = None) -> List[BookOut]:
        books = self.repo.list_active_books()
        rng = random.Random(seed)
        picked = rng.sample(books, min(n, len(books)))
        return [BookOut.model_validate(b) for b in picked]

    def _get(self, book_id: int) -> BookModel:
        book = self.repo.get_book(book_id)
        if not book:
            raise BookNotFoundError()
        return book
