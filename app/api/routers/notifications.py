# app/api/routers/notifications.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import http_error
from app.data.database import get_db
from app.domain.errors import AppError
from app.domain.schemas import NotificationOut
from app.services.notification_service import NotificationInbox

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationOut])
def my_notifications(user_id: int = Query(...), db: Session = Depends(get_db)):
    return NotificationInbox(db).list_my(user_id)


@router.get("/unread-count")
def unread_count(user_id: int = Query(...), db: Session = Depends(get_db)):
    return {"unread": NotificationInbox(db).unread_count(user_id)}


@router.put("/read-all")
def mark_all_read(user_id: int = Query(...), db: Session = Depends(get_db)):
    return {"updated": NotificationInbox(db).mark_all_read(user_id)}


@router.put("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return NotificationInbox(db).mark_read(notification_id, user_id)
    except AppError as e:
        raise http_error(e)
