from sqlalchemy import Column, Integer, String
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class UserCoins(Base, TimestampMixin):
    __tablename__ = "user_coins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), unique=True, nullable=False, index=True)
    coin_balance = Column(Integer, default=0, nullable=False)
