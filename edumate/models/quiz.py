from sqlalchemy import Column, Integer, String, Text, JSON
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class Quiz(Base, TimestampMixin):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    # level, class, subject, topic, difficulty... (see QuizOptions schema)
    options = Column(JSON, nullable=False, default=dict)
    questions = Column(JSON, nullable=False, default=list)
