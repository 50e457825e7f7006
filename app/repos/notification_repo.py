from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.data.models.notification import NotificationModel


class NotificationRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_many(self, notifications: list[NotificationModel]) -> None:
        self.db.add_all(notifications)
        self.db.commit()

    def get_notification(self, notification_id: int) -> NotificationModel | None:
        return self.db.get(NotificationModel, notification_id)

    def list_for_user(self, user_id: int) -> list[NotificationModel]:
        return list(
            self.db.execute(
                select(NotificationModel)
                .where(NotificationModel.user_id == user_id)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            ).scalars().all()
        )

    def count_unread(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
        ).scalar_one()

    def mark_all_read(self, user_id: int) -> int:
        result = self.db.execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()
