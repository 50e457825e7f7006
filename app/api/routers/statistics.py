# app/api/routers/statistics.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import http_error
from app.data.database import get_db
from app.domain.enums import StatisticKind
from app.domain.errors import AppError
from app.domain.schemas import StatisticsOut
from app.services.statistics_service import StatisticsService

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("/{kind}", response_model=StatisticsOut)
def get_statistics(kind: StatisticKind, db: Session = Depends(get_db)):
    """
    Pusta baza -> 404 z kodem NO_ORDERS_STORED / NO_USERS_STORED.
    """
    try:
        return StatisticsService(db).get_statistics(kind)
    except AppError as e:
        raise http_error(e)
