# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_lock_service, get_notifier
from app.api.errors import http_error
from app.data.database import get_db
from app.domain.enums import OrderStatus
from app.domain.errors import AppError
from app.domain.schemas import (
    OrderAddressUpdate,
    OrderCancel,
    OrderCreate,
    OrderOut,
    OrderStatusUpdate,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
    lock_service=Depends(get_lock_service),
):
    return OrderService(db, notifier=notifier, lock_service=lock_service)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamowienie z aktywnego koszyka usera.
    """
    try:
        return svc.create_order(user_id, payload.address)
    except AppError as e:
        raise http_error(e)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int | None = Query(None),
    status: OrderStatus | None = Query(None),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(user_id=user_id, status=status)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, svc: OrderService = Depends(get_service)):
    try:
        return svc.get_order(order_id)
    except AppError as e:
        raise http_error(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.update_order_status(order_id, payload.status)
    except AppError as e:
        raise http_error(e)


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    payload: OrderCancel,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.cancel_order(order_id, user_id, payload.reason)
    except AppError as e:
        raise http_error(e)


@router.put("/{order_id}/address", response_model=OrderOut)
def change_address(
    order_id: int,
    payload: OrderAddressUpdate,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.change_order_address(order_id, user_id, payload.address)
    except AppError as e:
        raise http_error(e)


@router.delete("/{order_id}", status_code=204)
def deactivate_order(order_id: int, svc: OrderService = Depends(get_service)):
    try:
        svc.deactivate_order(order_id)
    except AppError as e:
        raise http_error(e)
