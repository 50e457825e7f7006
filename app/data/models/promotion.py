from sqlalchemy import Boolean, Column, Date, Integer, Text

from app.data.database import Base


class PromotionModel(Base):
    __tablename__ = "promotions"

    id = Column(Integer, primary_key=True)
    content = Column(Text, nullable=False)
    percentage = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
