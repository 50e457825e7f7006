# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, List
from decimal import Decimal
from datetime import date, datetime

from app.domain.enums import (
    NotificationType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    Role,
    StatisticKind,
    StockDebitPolicy,
)


# --- users ------------------------------------------------------------------

class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    role: Role = Role.CUSTOMER


class UserRead(BaseModel):
    id: int
    name: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


# --- catalog ----------------------------------------------------------------

class BookCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    category: str | None = None
    active: bool = True


class BookUpdate(BaseModel):
    """Pola opcjonalne, zmieniane tylko podane."""

    title: str | None = Field(None, min_length=1, max_length=255)
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    stock_quantity: int | None = Field(None, ge=0)
    category: str | None = None
    active: bool | None = None


class BookOut(BaseModel):
    id: int
    title: str
    price: Decimal
    stock_quantity: int
    category: str | None = None
    active: bool

    model_config = ConfigDict(from_attributes=True)


# --- cart -------------------------------------------------------------------

class ItemIn(BaseModel):
    """Schema dla dodawania ksiazki do koszyka."""

    book_id: int = Field(..., gt=0, description="ID ksiazki (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość (musi być > 0)")


class ItemQuantityIn(BaseModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    book_id: int
    title: str
    quantity: int
    price: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    status: str
    items: List[CartItemOut]
    total: Decimal


# --- orders -----------------------------------------------------------------

class OrderCreate(BaseModel):
    address: str = Field(..., min_length=1, max_length=255)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderCancel(BaseModel):
    # pusty powod walidowany w serwisie (OrderNeedReasonError)
    reason: str | None = Field(None, max_length=500)


class OrderAddressUpdate(BaseModel):
    address: str = Field(..., min_length=1, max_length=255)


class OrderItemOut(BaseModel):
    book_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class PaymentOut(BaseModel):
    id: int
    order_id: int
    method: PaymentMethod
    status: PaymentStatus
    amount: Decimal
    created_at: datetime
    paid_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    total_amount: Decimal
    address: str
    cancel_reason: str | None = None
    active: bool
    stock_policy: StockDebitPolicy
    created_at: datetime
    items: List[OrderItemOut]
    payment: PaymentOut | None = None

    model_config = ConfigDict(from_attributes=True)


# --- payments ---------------------------------------------------------------

class PaymentCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    method: PaymentMethod


# --- statistics -------------------------------------------------------------

class CustomerStat(BaseModel):
    user_id: int
    name: str | None = None
    total_spent: Decimal


class BookStat(BaseModel):
    book_id: int
    title: str | None = None
    total_sold: int


class DailyValue(BaseModel):
    date: date
    value: Decimal


class OrderStatusCounts(BaseModel):
    pending_payment: int = 0
    pending: int = 0
    confirmed: int = 0
    processing: int = 0
    delivering: int = 0
    delivered: int = 0
    cancelled: int = 0


class StatisticsOut(BaseModel):
    kind: StatisticKind
    result: Any


# --- notifications ----------------------------------------------------------

class NotificationOut(BaseModel):
    id: int
    content: str
    type: NotificationType
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- promotions -------------------------------------------------------------

class PromotionCreate(BaseModel):
    content: str = Field(..., min_length=1)
    percentage: int | None = Field(None, ge=0, le=100)
    start_date: date
    end_date: date
    active: bool = True


class PromotionUpdate(BaseModel):
    content: str | None = Field(None, min_length=1)
    percentage: int | None = Field(None, ge=0, le=100)
    start_date: date | None = None
    end_date: date | None = None
    active: bool | None = None


class PromotionOut(BaseModel):
    id: int
    content: str
    percentage: int | None = None
    start_date: date
    end_date: date
    active: bool

    model_config = ConfigDict(from_attributes=True)
