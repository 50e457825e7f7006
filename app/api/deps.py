# app/api/deps.py
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService


def get_notifier() -> NotificationService:
    return NotificationService()


def get_lock_service() -> LockService:
    return LockService()
