from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.data.models.promotion import PromotionModel


class PromotionRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_promotion(self, promotion_id: int) -> PromotionModel | None:
        return self.db.get(PromotionModel, promotion_id)

    def list_promotions(self) -> list[PromotionModel]:
        return list(self.db.execute(select(PromotionModel).order_by(PromotionModel.id)).scalars().all())

    def content_exists(self, content: str, exclude_id: int | None = None) -> bool:
        stmt = select(PromotionModel.id).where(func.lower(PromotionModel.content) == content.lower())
        if exclude_id is not None:
            stmt = stmt.where(PromotionModel.id != exclude_id)
        return self.db.execute(stmt).first() is not None

    def save(self, promotion: PromotionModel) -> PromotionModel:
        self.db.add(promotion)
        self.db.commit()
        self.db.refresh(promotion)
        return promotion

    def delete(self, promotion: PromotionModel) -> None:
        self.db.delete(promotion)
        self.db.commit()
