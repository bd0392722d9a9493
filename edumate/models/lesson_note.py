from sqlalchemy import Column, Integer, String, Text, JSON, Index
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class LessonNote(Base, TimestampMixin):
    __tablename__ = "lesson_notes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    level = Column(String(8), nullable=False)
    class_name = Column(String(64), nullable=False)
    subject = Column(String(128), nullable=False)
    course = Column(String(128), nullable=True)
    strand = Column(String(255), nullable=False)
    sub_strand = Column(String(255), nullable=False)
    content_standard = Column(String(512), nullable=False)
    indicator = Column(String(512), nullable=False)
    subject_id = Column(Integer, nullable=True, index=True)
    strand_id = Column(Integer, nullable=True, index=True)
    indicator_id = Column(Integer, nullable=True, index=True)
    pdf_url = Column(String(1024), nullable=False, default="")
    thumbnail_url = Column(String(1024), nullable=False, default="")
    keywords = Column(JSON, nullable=False, default=list)


Index("ix_lesson_notes_level_class", LessonNote.level, LessonNote.class_name)
