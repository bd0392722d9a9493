import enum
import uuid
from sqlalchemy import Column, String, Boolean, Enum, Index
from edumate.core.database import Base
from edumate.models.base import TimestampMixin, enum_values


class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    # Ids are issued by the mobile app's auth provider (UUID strings).
    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    hashed_password = Column(String(255), nullable=True)
    role = Column(Enum(UserRole, values_callable=enum_values), nullable=False, default=UserRole.STUDENT)
    is_active = Column(Boolean, default=True, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)


Index("ix_users_role_active", User.role, User.is_active)
