# app/services/notification_service.py
from typing import Protocol

from sqlalchemy.orm import Session

from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.data.models.notification import NotificationModel
from app.domain.enums import NotificationType, Role
from app.domain.errors import NotificationNotFoundError, UnauthorizedError
from app.repos.notification_repo import NotificationRepo
from app.repos.user_repo import UserRepo
from app.utils.retry import broker_retry
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationSink(Protocol):
    def notify(self, target: int | Role, content: str, type: NotificationType) -> None:
        ...


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Fire-and-forget przez Celery, blad wysylki nie przerywa operacji biznesowej.
    """

    def notify(self, target: int | Role, content: str, type: NotificationType) -> None:
        try:
            self._dispatch(target, content, type)
        except Exception as e:
            logger.warning(f"[NOTIFICATION] dispatch failed for {target} ({type.value}): {e}")

    @broker_retry()
    def _dispatch(self, target: int | Role, content: str, type: NotificationType) -> None:
        if isinstance(target, Role):
            deliver_notification_task.delay(None, target.value, content, type.value)
        else:
            deliver_notification_task.delay(target, None, content, type.value)


@celery_app.task(name="app.services.notification_service.deliver_notification_task")
def deliver_notification_task(user_id: int | None, role: str | None, content: str, type: str):
    """
    Celery task - zapisuje powiadomienie dla usera albo dla wszystkich userow z rola.
    Email/SMS/push poza zakresem.
    """
    db = SessionLocal()
    try:
        users = UserRepo(db)
        if role is not None:
            recipients = [u.id for u in users.list_by_role(role)]
        elif users.get_user(user_id) is not None:
            recipients = [user_id]
        else:
            logger.warning(f"[NOTIFICATION] user {user_id} not found, dropped")
            recipients = []

        NotificationRepo(db).add_many(
            [NotificationModel(user_id=uid, content=content, type=type) for uid in recipients]
        )
        logger.info(f"[NOTIFICATION] {type}: stored for {len(recipients)} user(s)")

        return {"type": type, "recipients": recipients, "status": "sent"}
    finally:
        db.close()



class NotificationInbox:
    """Odczyt powiadomien zalogowanego usera."""

    def __init__(self, db: Session):
        self.repo = NotificationRepo(db)

    def list_my(self, user_id: int) -> list[NotificationModel]:
        return self.repo.list_for_user(user_id)

    def unread_count(self, user_id: int) -> int:
        return self.repo.count_unread(user_id)

    def mark_read(self, notification_id: int, user_id: int) -> NotificationModel:
        notification = self.repo.get_notification(notification_id)
        if notification is None:
            raise NotificationNotFoundError()
        if notification.user_id != user_id:
            raise UnauthorizedError()

        notification.read = True
        self.repo.commit()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        return self.repo.mark_all_read(user_id)
