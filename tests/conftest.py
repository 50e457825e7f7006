"""Pytest fixtures: in-memory SQLite, in-process lock and notification fakes."""
import os

# przed importem app.* (engine tworzony przy imporcie)
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data.database import Base
from app.data import models  # noqa: F401
from app.data.models.book import BookModel
from app.data.models.user import UserModel
from app.domain.enums import Role, StockDebitPolicy
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.services.lock_service import LockService


ADMIN_ID = 1
STAFF_ID = 2
ALICE_ID = 10
BOB_ID = 11

CHEAP_BOOK = 1    # 10.00, stock 10
RARE_BOOK = 2     # 25.50, stock 3
SOLD_OUT_BOOK = 3  # 5.00, stock 0
HIDDEN_BOOK = 4   # inactive


class FakeLockService:
    """Per-order locks kept in a dict instead of redis."""

    def __init__(self):
        self.held: dict[str, str] = {}

    def hold(self, order_id: int, owner: str = "someone-else") -> None:
        self.held[LockService.order_key(order_id)] = owner

    def acquire_order_lock(self, order_id: int, owner: str, ttl: int) -> bool:
        key = LockService.order_key(order_id)
        if key in self.held:
            return False
        self.held[key] = owner
        return True

    def release_order_lock(self, order_id: int, owner: str) -> bool:
        key = LockService.order_key(order_id)
        if self.held.get(key) == owner:
            del self.held[key]
            return True
        return False


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, target, content, type):
        self.sent.append((target, content, type))

    def targets(self):
        return [t for t, _, _ in self.sent]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    db.add_all(
        [
            UserModel(id=ADMIN_ID, name="admin", role=Role.ADMIN.value),
            UserModel(id=STAFF_ID, name="staff", role=Role.STAFF.value),
            UserModel(id=ALICE_ID, name="alice", role=Role.CUSTOMER.value),
            UserModel(id=BOB_ID, name="bob", role=Role.CUSTOMER.value),
        ]
    )
    db.add_all(
        [
            BookModel(id=CHEAP_BOOK, title="Lalka", price=Decimal("10.00"), stock_quantity=10),
            BookModel(id=RARE_BOOK, title="Solaris", price=Decimal("25.50"), stock_quantity=3),
            BookModel(id=SOLD_OUT_BOOK, title="Quo Vadis", price=Decimal("5.00"), stock_quantity=0),
            BookModel(
                id=HIDDEN_BOOK, title="Ferdydurke", price=Decimal("7.00"), stock_quantity=5, active=False
            ),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def locks():
    return FakeLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def carts(seeded):
    return CartService(seeded)


@pytest.fixture
def orders(seeded, notifier, locks):
    return OrderService(
        seeded,
        notifier=notifier,
        lock_service=locks,
        stock_policy=StockDebitPolicy.ON_DELIVERING,
    )


@pytest.fixture
def orders_on_creation(seeded, notifier, locks):
    return OrderService(
        seeded,
        notifier=notifier,
        lock_service=locks,
        stock_policy=StockDebitPolicy.ON_CREATION,
    )


def stock_of(db, book_id: int) -> int:
    db.expire_all()
    return db.get(BookModel, book_id).stock_quantity
