from sqlalchemy import Column, Integer, String, Text, Index
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class Curriculum(Base, TimestampMixin):
    __tablename__ = "curricula"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    level = Column(String(8), nullable=False)
    class_name = Column(String(64), nullable=False)
    subject = Column(String(128), nullable=False)
    course = Column(String(128), nullable=True)
    pdf_url = Column(String(1024), nullable=False, default="")
    thumbnail_url = Column(String(1024), nullable=False, default="")


Index("ix_curricula_level_subject", Curriculum.level, Curriculum.subject)
