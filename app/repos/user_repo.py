from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_users(self, user_ids: list[int]) -> dict[int, UserModel]:
        rows = self.db.execute(select(UserModel).where(UserModel.id.in_(user_ids))).scalars().all()
        return {u.id: u for u in rows}

    def list_by_role(self, role: str) -> list[UserModel]:
        return list(
            self.db.execute(
                select(UserModel)
                .where(UserModel.role == role, UserModel.active.is_(True))
                .order_by(UserModel.id)
            ).scalars().all()
        )

    def count_users(self) -> int:
        return self.db.execute(select(func.count(UserModel.id))).scalar_one()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
