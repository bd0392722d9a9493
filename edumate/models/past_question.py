from sqlalchemy import Column, Integer, String, Boolean, JSON, Index
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class PastQuestionPaper(Base, TimestampMixin):
    __tablename__ = "past_questions"

    id = Column(Integer, primary_key=True, index=True)
    exam_type = Column(String(32), nullable=False)
    subject_name = Column(String(128), nullable=False)
    subject_id = Column(String(64), nullable=False)
    year = Column(Integer, nullable=False)
    course = Column(String(128), nullable=True)
    level = Column(String(8), nullable=False)
    questions_count = Column(Integer, nullable=False, default=0)
    coin_price = Column(Integer, nullable=False, default=0)
    has_paper_1 = Column(Boolean, nullable=False, default=True)
    has_paper_2 = Column(Boolean, nullable=False, default=False)
    # {"paper_1": {...}, "paper_2": {...}}; always replaced as a whole document.
    questions = Column(JSON, nullable=False, default=dict)
    created_by = Column(String(64), nullable=True)


Index("ix_past_questions_exam_subject_year", PastQuestionPaper.exam_type, PastQuestionPaper.subject_name, PastQuestionPaper.year)
