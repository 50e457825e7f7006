"""Tests for the stock ledger (conditional debit, compensation)."""
import pytest

from app.data.models.book import BookModel
from app.domain.errors import BookNotFoundError, InsufficientStockError
from app.services.inventory_service import InventoryLedger

from conftest import CHEAP_BOOK, RARE_BOOK, SOLD_OUT_BOOK, stock_of


@pytest.fixture
def ledger(seeded):
    return InventoryLedger(seeded)


def test_reserve_decrements_stock(seeded, ledger):
    ledger.reserve(CHEAP_BOOK, 4)
    seeded.commit()

    assert stock_of(seeded, CHEAP_BOOK) == 6


def test_reserve_exact_stock_goes_to_zero(seeded, ledger):
    ledger.reserve(RARE_BOOK, 3)

    assert ledger.available(RARE_BOOK) == 0


def test_reserve_more_than_stock_fails_and_keeps_stock(seeded, ledger):
    with pytest.raises(InsufficientStockError) as exc:
        ledger.reserve(RARE_BOOK, 4)

    assert exc.value.book_id == RARE_BOOK
    assert exc.value.requested == 4
    assert stock_of(seeded, RARE_BOOK) == 3


def test_reserve_unknown_book(ledger):
    with pytest.raises(BookNotFoundError):
        ledger.reserve(999, 1)


@pytest.mark.parametrize("quantity", [0, -2])
def test_reserve_rejects_non_positive_quantity(ledger, quantity):
    with pytest.raises(ValueError):
        ledger.reserve(CHEAP_BOOK, quantity)


def test_release_returns_stock(seeded, ledger):
    ledger.release(SOLD_OUT_BOOK, 2)

    assert stock_of(seeded, SOLD_OUT_BOOK) == 2


def test_reserve_all_compensates_earlier_lines(seeded, ledger):
    with pytest.raises(InsufficientStockError):
        ledger.reserve_all([(CHEAP_BOOK, 5), (RARE_BOOK, 1), (SOLD_OUT_BOOK, 1)])

    assert stock_of(seeded, CHEAP_BOOK) == 10
    assert stock_of(seeded, RARE_BOOK) == 3
    assert stock_of(seeded, SOLD_OUT_BOOK) == 0


def test_reserve_all_debits_every_line(seeded, ledger):
    ledger.reserve_all([(CHEAP_BOOK, 2), (RARE_BOOK, 3)])

    assert stock_of(seeded, CHEAP_BOOK) == 8
    assert stock_of(seeded, RARE_BOOK) == 0


def test_check_available_does_not_touch_stock(seeded, ledger):
    ledger.check_available([(CHEAP_BOOK, 10), (RARE_BOOK, 3)])

    with pytest.raises(InsufficientStockError):
        ledger.check_available([(CHEAP_BOOK, 1), (RARE_BOOK, 4)])

    assert stock_of(seeded, CHEAP_BOOK) == 10
    assert stock_of(seeded, RARE_BOOK) == 3


def test_loaded_book_sees_debit_without_manual_refresh(seeded, ledger):
    book = seeded.get(BookModel, CHEAP_BOOK)
    assert book.stock_quantity == 10

    ledger.reserve(CHEAP_BOOK, 3)

    assert book.stock_quantity == 7
