"""Tests for books and users."""
from decimal import Decimal

import pytest

from app.domain.enums import Role
from app.domain.errors import BookNotFoundError, UserNotFoundError
from app.domain.schemas import BookCreate, BookUpdate, UserCreate
from app.services.book_service import BookService
from app.services.user_service import UserService

from conftest import CHEAP_BOOK, HIDDEN_BOOK, RARE_BOOK, SOLD_OUT_BOOK


def test_list_skips_inactive_books(seeded):
    books = BookService(seeded).list_active_books()

    assert [b.id for b in books] == [CHEAP_BOOK, RARE_BOOK, SOLD_OUT_BOOK]


def test_create_and_update_book(db):
    service = BookService(db)
    created = service.create_book(BookCreate(title="Solaris", price=Decimal("29.99"), stock_quantity=4))

    updated = service.update_book(created.id, BookUpdate(price=Decimal("19.99")))

    assert updated.price == Decimal("19.99")
    assert updated.stock_quantity == 4
    assert updated.title == "Solaris"


def test_missing_book(db):
    with pytest.raises(BookNotFoundError):
        BookService(db).get_book(42)


def test_sample_is_reproducible_with_seed(seeded):
    service = BookService(seeded)

    first = [b.id for b in service.sample_active_books(2, seed=7)]
    second = [b.id for b in service.sample_active_books(2, seed=7)]

    assert first == second
    assert len(set(first)) == 2
    assert HIDDEN_BOOK not in first


def test_sample_larger_than_catalog(seeded):
    picked = BookService(seeded).sample_active_books(50, seed=1)

    assert sorted(b.id for b in picked) == [CHEAP_BOOK, RARE_BOOK, SOLD_OUT_BOOK]


def test_create_user_is_idempotent(db):
    service = UserService(db)

    created = service.create_user(UserCreate(id=5, name="ewa", role=Role.STAFF))
    again = service.create_user(UserCreate(id=5, name="other"))

    assert created.role == Role.STAFF
    assert again.name == "ewa"


def test_missing_user(db):
    with pytest.raises(UserNotFoundError):
        UserService(db).get_user(5)


def test_seed_fills_empty_database_once(db, session_factory, monkeypatch):
    from app.data import seed as seed_module
    from app.data.models.book import BookModel
    from app.data.models.user import UserModel

    monkeypatch.setattr(seed_module, "SessionLocal", session_factory)

    seed_module.seed()
    seed_module.seed()

    assert db.query(UserModel).count() == 3
    assert db.query(BookModel).count() == 5
