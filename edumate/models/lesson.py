from sqlalchemy import Column, Integer, JSON
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class Lesson(Base, TimestampMixin):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True)
    # level, class, subject, topic, strand links... (see LessonOptions schema)
    options = Column(JSON, nullable=False, default=dict)
    # title, body, video, attachments and practice questions
    content = Column(JSON, nullable=False, default=dict)
