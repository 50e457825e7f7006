# app/services/promotion_service.py
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from app.data.models.promotion import PromotionModel
from app.domain.errors import (
    InvalidDateRangeError,
    PromotionContentExistsError,
    PromotionNotFoundError,
)
from app.domain.schemas import PromotionCreate, PromotionOut, PromotionUpdate
from app.repos.promotion_repo import PromotionRepo


class PromotionService:
    def __init__(self, db: Session):
        self.repo = PromotionRepo(db)

    def create_promotion(self, payload: PromotionCreate) -> PromotionOut:
        if payload.end_date < payload.start_date:
            raise InvalidDateRangeError()

        if self.repo.content_exists(payload.content):
            raise PromotionContentExistsError()

        promotion = self.repo.save(PromotionModel(**payload.model_dump()))
        return PromotionOut.model_validate(promotion)

    def get_promotion(self, promotion_id: int) -> PromotionOut:
        return PromotionOut.model_validate(self._get(promotion_id))

    def list_promotions(self) -> List[PromotionOut]:
        return [PromotionOut.model_validate(p) for p in self.repo.list_promotions()]

    def list_active(self, today: date | None = None) -> List[PromotionOut]:
        today = today or date.today()
        return [
            PromotionOut.model_validate(p)
            for p in self.repo.list_promotions()
            if p.active and today <= p.end_date
        ]

    def list_inactive(self, today: date | None = None) -> List[PromotionOut]:
        today = today or date.today()
        return [
            PromotionOut.model_validate(p)
            for p in self.repo.list_promotions()
            if not p.active or today > p.end_date
        ]

    def update_promotion(self, promotion_id: int, payload: PromotionUpdate) -> PromotionOut:
        promotion = self._get(promotion_id)
        changes = payload.model_dump(exclude_unset=True)

        start = changes.get("start_date", promotion.start_date)
        end = changes.get("end_date", promotion.end_date)
        if end < start:
            raise InvalidDateRangeError()

        content = changes.get("content")
        if content and self.repo.content_exists(content, exclude_id=promotion_id):
            raise PromotionContentExistsError()

        for field, value in changes.items():
            setattr(promotion, field, value)

        return PromotionOut.model_validate(self.repo.save(promotion))

    def set_active(self, promotion_id: int, active: bool) -> PromotionOut:
        promotion = self._get(promotion_id)
        promotion.active = active
        return PromotionOut.model_validate(self.repo.save(promotion))

    def delete_promotion(self, promotion_id: int) -> None:
        self.repo.delete(self._get(promotion_id))

    def _get(self, promotion_id: int) -> PromotionModel:
        promotion = self.repo.get_promotion(promotion_id)
        if not promotion:
            raise PromotionNotFoundError()
        return promotion
