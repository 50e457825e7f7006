# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal
from app.data.models.book import BookModel
from app.data.models.user import UserModel
from app.domain.enums import Role
from app.utils.logging import get_logger

logger = get_logger(__name__)

_USERS = [
    (1, "admin", Role.ADMIN),
    (2, "staff", Role.STAFF),
    (3, "customer", Role.CUSTOMER),
]

_BOOKS = [
    ("Pan Tadeusz", Decimal("39.90"), 20, "poetry"),
    ("Lalka", Decimal("44.50"), 15, "novel"),
    ("Quo Vadis", Decimal("36.00"), 10, "novel"),
    ("Solaris", Decimal("29.99"), 8, "sci-fi"),
    ("Ferdydurke", Decimal("31.20"), 5, "novel"),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            return
        db.add_all(UserModel(id=uid, name=name, role=role.value) for uid, name, role in _USERS)
        db.add_all(
            BookModel(title=title, price=price, stock_quantity=stock, category=category)
            for title, price, stock, category in _BOOKS
        )
        db.commit()
        logger.info(f"Seeded {len(_USERS)} users and {len(_BOOKS)} books")
    finally:
        db.close()


if __name__ == "__main__":
    from app.data import models  # noqa: F401
    from app.data.database import Base, engine

    Base.metadata.create_all(bind=engine)
    seed()
