# app/api/routers/payments.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_lock_service
from app.api.errors import http_error
from app.data.database import get_db
from app.domain.enums import PaymentStatus
from app.domain.errors import AppError
from app.domain.schemas import PaymentCreate, PaymentOut
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


def get_service(
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
):
    return PaymentService(db, lock_service=lock_service)


@router.post("/", response_model=PaymentOut, status_code=201)
def create_payment(
    payload: PaymentCreate,
    user_id: int = Query(...),
    svc: PaymentService = Depends(get_service),
):
    try:
        return svc.create_payment(payload.order_id, user_id, payload.method)
    except AppError as e:
        raise http_error(e)


@router.get("/", response_model=List[PaymentOut])
def list_payments(
    user_id: int | None = Query(None),
    status: PaymentStatus | None = Query(None),
    svc: PaymentService = Depends(get_service),
):
    return svc.list_payments(user_id=user_id, status=status)


@router.get("/order/{order_id}", response_model=PaymentOut)
def get_payment_by_order(order_id: int, svc: PaymentService = Depends(get_service)):
    try:
        return svc.get_payment_by_order(order_id)
    except AppError as e:
        raise http_error(e)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: int, svc: PaymentService = Depends(get_service)):
    try:
        return svc.get_payment(payment_id)
    except AppError as e:
        raise http_error(e)


@router.put("/{payment_id}/done", response_model=PaymentOut)
def mark_payment_done(payment_id: int, svc: PaymentService = Depends(get_service)):
    try:
        return svc.mark_payment_done(payment_id)
    except AppError as e:
        raise http_error(e)


@router.put("/{payment_id}/refunded", response_model=PaymentOut)
def complete_refund(payment_id: int, svc: PaymentService = Depends(get_service)):
    try:
        return svc.complete_refund(payment_id)
    except AppError as e:
        raise http_error(e)
