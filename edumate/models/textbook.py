from sqlalchemy import Column, Integer, JSON
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class Textbook(Base, TimestampMixin):
    __tablename__ = "textbooks"

    id = Column(Integer, primary_key=True, index=True)
    options = Column(JSON, nullable=False, default=dict)
    content = Column(JSON, nullable=False, default=dict)
