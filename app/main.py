# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from app.data.database import Base, engine
from app.api.routers import (
    books,
    carts,
    health,
    notifications,
    orders,
    payments,
    promotions,
    statistics,
    users,
)
from app.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)

# modele musza byc zarejestrowane w Base.metadata przed create_all
from app.data import models  # noqa: F401


def init_db() -> None:
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Bookstore Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(books.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(statistics.router)
    app.include_router(notifications.router)
    app.include_router(promotions.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
