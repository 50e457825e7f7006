# app/domain/enums.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    COD = "COD"
    E_WALLET = "E_WALLET"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    REFUNDING = "REFUNDING"
    REFUNDED = "REFUNDED"


class CartStatus(str, Enum):
    ACTIVE = "ACTIVE"


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    STAFF = "STAFF"
    ADMIN = "ADMIN"


class NotificationType(str, Enum):
    FOR_CUSTOMERS = "FOR_CUSTOMERS"
    FOR_STAFFS = "FOR_STAFFS"
    FOR_ADMINS = "FOR_ADMINS"
    FOR_CUSTOMERS_PERSONAL = "FOR_CUSTOMERS_PERSONAL"
    FOR_STAFFS_PERSONAL = "FOR_STAFFS_PERSONAL"
    FOR_ADMINS_PERSONAL = "FOR_ADMINS_PERSONAL"


class StockDebitPolicy(str, Enum):
    ON_DELIVERING = "ON_DELIVERING"
    ON_CREATION = "ON_CREATION"


class StatisticKind(str, Enum):
    TOP_CUSTOMERS = "top-customers"
    TOP_BOOKS = "top-books"
    TOTAL_CUSTOMERS = "total-customers"
    TOTAL_ORDERS = "total-orders"
    TOTAL_REVENUE = "total-revenue"
    SALES_OVER_TIME = "sales-over-time"
    ORDERS_OVER_TIME = "orders-over-time"
    ORDERS_STATUS = "orders-status"
