"""Tests for cart commands and the cart side of order creation."""
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.data.models.book import BookModel
from app.data.models.cart import CartModel
from app.domain.errors import (
    BookNotFoundError,
    CartItemNotFoundError,
    CartNotFoundError,
    ExceedStockError,
    ProductOutOfStockError,
    QuantityInvalidError,
)

from conftest import ALICE_ID, BOB_ID, CHEAP_BOOK, HIDDEN_BOOK, RARE_BOOK, SOLD_OUT_BOOK


def test_get_my_cart_creates_empty_cart(carts):
    view = carts.get_my_cart(ALICE_ID)

    assert view["user_id"] == ALICE_ID
    assert view["status"] == "ACTIVE"
    assert view["items"] == []
    assert view["total"] == Decimal("0.00")


def test_add_item_and_total(carts):
    carts.add_item(ALICE_ID, CHEAP_BOOK, 2)
    view = carts.add_item(ALICE_ID, RARE_BOOK, 1)

    assert [(i["book_id"], i["quantity"]) for i in view["items"]] == [(CHEAP_BOOK, 2), (RARE_BOOK, 1)]
    assert view["total"] == Decimal("45.50")


def test_add_same_book_increments_quantity(carts):
    carts.add_item(ALICE_ID, CHEAP_BOOK, 2)
    view = carts.add_item(ALICE_ID, CHEAP_BOOK, 3)

    assert len(view["items"]) == 1
    assert view["items"][0]["quantity"] == 5


def test_add_item_over_stock_is_rejected(carts):
    carts.add_item(ALICE_ID, RARE_BOOK, 2)

    with pytest.raises(ExceedStockError):
        carts.add_item(ALICE_ID, RARE_BOOK, 2)

    assert carts.get_my_cart(ALICE_ID)["items"][0]["quantity"] == 2


def test_add_sold_out_book(carts):
    with pytest.raises(ProductOutOfStockError):
        carts.add_item(ALICE_ID, SOLD_OUT_BOOK, 1)


@pytest.mark.parametrize("book_id", [HIDDEN_BOOK, 999])
def test_add_inactive_or_missing_book(carts, book_id):
    with pytest.raises(BookNotFoundError):
        carts.add_item(ALICE_ID, book_id, 1)


def test_add_zero_quantity(carts):
    with pytest.raises(QuantityInvalidError):
        carts.add_item(ALICE_ID, CHEAP_BOOK, 0)


def test_update_and_remove_item(carts):
    carts.add_item(ALICE_ID, CHEAP_BOOK, 2)
    carts.add_item(ALICE_ID, RARE_BOOK, 1)

    view = carts.update_item_quantity(ALICE_ID, CHEAP_BOOK, 7)
    assert view["items"][0]["quantity"] == 7

    with pytest.raises(ExceedStockError):
        carts.update_item_quantity(ALICE_ID, RARE_BOOK, 4)

    view = carts.remove_item(ALICE_ID, RARE_BOOK)
    assert [i["book_id"] for i in view["items"]] == [CHEAP_BOOK]

    with pytest.raises(CartItemNotFoundError):
        carts.remove_item(ALICE_ID, RARE_BOOK)


def test_commands_need_existing_cart(carts):
    with pytest.raises(CartNotFoundError):
        carts.update_item_quantity(BOB_ID, CHEAP_BOOK, 1)

    with pytest.raises(CartNotFoundError):
        carts.find_active_cart_for_user(BOB_ID)


def test_clear_cart(carts):
    carts.add_item(ALICE_ID, CHEAP_BOOK, 2)
    carts.add_item(ALICE_ID, RARE_BOOK, 1)

    view = carts.clear_cart(ALICE_ID)

    assert view["items"] == []
    assert view["total"] == Decimal("0.00")


def test_every_command_bumps_version(carts):
    carts.add_item(ALICE_ID, CHEAP_BOOK, 1)
    cart = carts.find_active_cart_for_user(ALICE_ID)
    before = cart.version

    carts.update_item_quantity(ALICE_ID, CHEAP_BOOK, 2)
    carts.remove_item(ALICE_ID, CHEAP_BOOK)

    assert carts.find_active_cart_for_user(ALICE_ID).version == before + 2


def test_consume_all_items_keeps_order(seeded, carts):
    carts.add_item(ALICE_ID, RARE_BOOK, 1)
    carts.add_item(ALICE_ID, CHEAP_BOOK, 2)
    cart = carts.find_active_cart_for_user(ALICE_ID)
    version = cart.version

    consumed = carts.consume_all_items(cart)
    seeded.commit()

    assert [(i.book_id, i.quantity) for i in consumed] == [(RARE_BOOK, 1), (CHEAP_BOOK, 2)]
    cart = carts.find_active_cart_for_user(ALICE_ID)
    assert cart.items == []
    assert cart.version == version + 1


def test_reconcile_clamps_and_removes_foreign_items(seeded, carts):
    carts.add_item(BOB_ID, RARE_BOOK, 3)
    carts.add_item(BOB_ID, CHEAP_BOOK, 4)
    carts.add_item(ALICE_ID, RARE_BOOK, 3)

    seeded.get(BookModel, RARE_BOOK).stock_quantity = 1
    seeded.get(BookModel, CHEAP_BOOK).stock_quantity = 0
    seeded.commit()

    changed = carts.reconcile_other_carts([RARE_BOOK, CHEAP_BOOK], exclude_user_id=ALICE_ID)
    seeded.commit()

    assert changed == 2
    bob = carts.get_my_cart(BOB_ID)
    assert [(i["book_id"], i["quantity"]) for i in bob["items"]] == [(RARE_BOOK, 1)]
    # koszyk zamawiajacego nie jest ruszany
    alice = carts.get_my_cart(ALICE_ID)
    assert alice["items"][0]["quantity"] == 3


def test_reconcile_without_shortage_changes_nothing(carts):
    carts.add_item(BOB_ID, RARE_BOOK, 2)
    bob_version = carts.find_active_cart_for_user(BOB_ID).version

    assert carts.reconcile_other_carts([RARE_BOOK], exclude_user_id=ALICE_ID) == 0
    assert carts.find_active_cart_for_user(BOB_ID).version == bob_version


def test_second_cart_for_user_is_rejected_by_database(seeded, carts):
    carts.get_my_cart(ALICE_ID)

    seeded.add(CartModel(user_id=ALICE_ID, status="ACTIVE", version=1))
    with pytest.raises(IntegrityError):
        seeded.flush()
    seeded.rollback()


def test_get_or_create_reuses_cart_created_concurrently(seeded, carts, monkeypatch):
    existing = carts.get_my_cart(ALICE_ID)
    lookups = []
    original_lookup = carts.repo.get_active_cart_by_user

    def lookup_missing_first_time(user_id):
        # pierwszy odczyt sprzed commita rownoleglego requestu
        lookups.append(user_id)
        if len(lookups) == 1:
            return None
        return original_lookup(user_id)

    monkeypatch.setattr(carts.repo, "get_active_cart_by_user", lookup_missing_first_time)

    view = carts.add_item(ALICE_ID, CHEAP_BOOK, 1)

    assert view["cart_id"] == existing["cart_id"]
    assert view["items"][0]["quantity"] == 1
