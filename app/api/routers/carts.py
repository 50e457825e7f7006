#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import http_error
from app.data.database import get_db
from app.domain.errors import AppError
from app.domain.schemas import (
    ItemIn,
    ItemQuantityIn,
    CartOut,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(db: Session):
    return CartService(db)


@router.get("/me", response_model=CartOut)
def get_my_cart(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.get_my_cart(user_id)


@router.post("/me/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=user_id,
            book_id=payload.book_id,
            quantity=payload.quantity,
        )
    except AppError as e:
        raise http_error(e)


@router.patch("/me/items/{book_id}", response_model=CartOut)
def update_item(
    book_id: int,
    payload: ItemQuantityIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item_quantity(user_id, book_id, payload.quantity)
    except AppError as e:
        raise http_error(e)


@router.delete("/me/items/{book_id}", response_model=CartOut)
def remove_item(
    book_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user_id, book_id)
    except AppError as e:
        raise http_error(e)


@router.delete("/me/items", response_model=CartOut)
def clear_cart(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.clear_cart(user_id)
    except AppError as e:
        raise http_error(e)
