"""Tests for promotions (informational only, prices are not touched)."""
from datetime import date

import pytest

from app.domain.errors import (
    InvalidDateRangeError,
    PromotionContentExistsError,
    PromotionNotFoundError,
)
from app.domain.schemas import PromotionCreate, PromotionUpdate
from app.services.promotion_service import PromotionService


@pytest.fixture
def promotions(db):
    return PromotionService(db)


def _create(promotions, content="Summer -10%", start=date(2026, 6, 1), end=date(2026, 8, 31), **kw):
    return promotions.create_promotion(
        PromotionCreate(content=content, percentage=10, start_date=start, end_date=end, **kw)
    )


def test_create_and_get(promotions):
    created = _create(promotions)

    assert promotions.get_promotion(created.id).content == "Summer -10%"
    assert [p.id for p in promotions.list_promotions()] == [created.id]


def test_end_before_start_is_rejected(promotions):
    with pytest.raises(InvalidDateRangeError):
        _create(promotions, start=date(2026, 9, 1), end=date(2026, 8, 1))


def test_content_is_unique_case_insensitive(promotions):
    _create(promotions)

    with pytest.raises(PromotionContentExistsError):
        _create(promotions, content="SUMMER -10%")


def test_active_and_inactive_lists(promotions):
    running = _create(promotions, content="running")
    expired = _create(promotions, content="expired", start=date(2026, 1, 1), end=date(2026, 2, 1))
    switched_off = _create(promotions, content="off", active=False)

    today = date(2026, 7, 1)

    assert [p.id for p in promotions.list_active(today)] == [running.id]
    assert [p.id for p in promotions.list_inactive(today)] == [expired.id, switched_off.id]


def test_update_validates_range_and_content(promotions):
    first = _create(promotions, content="first")
    _create(promotions, content="second")

    with pytest.raises(InvalidDateRangeError):
        promotions.update_promotion(first.id, PromotionUpdate(end_date=date(2026, 1, 1)))

    with pytest.raises(PromotionContentExistsError):
        promotions.update_promotion(first.id, PromotionUpdate(content="Second"))

    # ta sama tresc co wlasna nie jest konfliktem
    updated = promotions.update_promotion(first.id, PromotionUpdate(content="FIRST", percentage=15))
    assert updated.content == "FIRST"
    assert updated.percentage == 15


def test_set_active_and_delete(promotions):
    created = _create(promotions)

    assert promotions.set_active(created.id, False).active is False

    promotions.delete_promotion(created.id)
    with pytest.raises(PromotionNotFoundError):
        promotions.get_promotion(created.id)
