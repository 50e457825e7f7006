# app/api/routers/promotions.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import http_error
from app.data.database import get_db
from app.domain.errors import AppError
from app.domain.schemas import PromotionCreate, PromotionOut, PromotionUpdate
from app.services.promotion_service import PromotionService

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.post("/", response_model=PromotionOut, status_code=201)
def create_promotion(payload: PromotionCreate, db: Session = Depends(get_db)):
    try:
        return PromotionService(db).create_promotion(payload)
    except AppError as e:
        raise http_error(e)


@router.get("/", response_model=List[PromotionOut])
def list_promotions(db: Session = Depends(get_db)):
    return PromotionService(db).list_promotions()


@router.get("/active", response_model=List[PromotionOut])
def list_active(db: Session = Depends(get_db)):
    return PromotionService(db).list_active()


@router.get("/inactive", response_model=List[PromotionOut])
def list_inactive(db: Session = Depends(get_db)):
    return PromotionService(db).list_inactive()


@router.get("/{promotion_id}", response_model=PromotionOut)
def get_promotion(promotion_id: int, db: Session = Depends(get_db)):
    try:
        return PromotionService(db).get_promotion(promotion_id)
    except AppError as e:
        raise http_error(e)


@router.put("/{promotion_id}", response_model=PromotionOut)
def update_promotion(promotion_id: int, payload: PromotionUpdate, db: Session = Depends(get_db)):
    try:
        return PromotionService(db).update_promotion(promotion_id, payload)
    except AppError as e:
        raise http_error(e)


@router.put("/{promotion_id}/active", response_model=PromotionOut)
def set_active(
    promotion_id: int,
    value: bool = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return PromotionService(db).set_active(promotion_id, value)
    except AppError as e:
        raise http_error(e)


@router.delete("/{promotion_id}", status_code=204)
def delete_promotion(promotion_id: int, db: Session = Depends(get_db)):
    try:
        PromotionService(db).delete_promotion(promotion_id)
    except AppError as e:
        raise http_error(e)
