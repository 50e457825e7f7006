from sqlalchemy import Boolean, Column, Integer, String

from app.data.database import Base
from app.domain.enums import Role


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=Role.CUSTOMER.value)
    active = Column(Boolean, nullable=False, default=True)
