from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from edumate.core.database import Base
from edumate.models.base import TimestampMixin


class Subject(Base, TimestampMixin):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    level = Column(String(8), nullable=False)
    course = Column(String(128), nullable=True)

    strands = relationship("Strand", back_populates="subject", cascade="all, delete-orphan")


class Strand(Base, TimestampMixin):
    __tablename__ = "curriculum_strands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    level = Column(String(8), nullable=False)
    class_name = Column(String(64), nullable=False)
    course = Column(String(128), nullable=True)

    subject = relationship("Subject", back_populates="strands")
    sub_strands = relationship("SubStrand", back_populates="strand", cascade="all, delete-orphan")


class SubStrand(Base, TimestampMixin):
    __tablename__ = "curriculum_sub_strands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    strand_id = Column(Integer, ForeignKey("curriculum_strands.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, nullable=False, index=True)

    strand = relationship("Strand", back_populates="sub_strands")
    content_standards = relationship("ContentStandard", back_populates="sub_strand", cascade="all, delete-orphan")


class ContentStandard(Base, TimestampMixin):
    __tablename__ = "curriculum_content_standards"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(512), nullable=False)
    sub_strand_id = Column(
        Integer, ForeignKey("curriculum_sub_strands.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Copied from the ancestors so list filters never join.
    strand_id = Column(Integer, nullable=False, index=True)
    subject_id = Column(Integer, nullable=False, index=True)
    level = Column(String(8), nullable=False)
    class_name = Column(String(64), nullable=False)
    course = Column(String(128), nullable=True)

    sub_strand = relationship("SubStrand", back_populates="content_standards")
    indicators = relationship("Indicator", back_populates="content_standard", cascade="all, delete-orphan")


class Indicator(Base, TimestampMixin):
    __tablename__ = "curriculum_indicators"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(512), nullable=False)
    content_standard_id = Column(
        Integer, ForeignKey("curriculum_content_standards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sub_strand_id = Column(Integer, nullable=False, index=True)
    strand_id = Column(Integer, nullable=False, index=True)
    subject_id = Column(Integer, nullable=False, index=True)
    level = Column(String(8), nullable=False)
    class_name = Column(String(64), nullable=False)
    course = Column(String(128), nullable=True)

    content_standard = relationship("ContentStandard", back_populates="indicators")


Index("ix_subjects_level_name", Subject.level, Subject.name)
Index("ix_curriculum_strands_subject_class", Strand.subject_id, Strand.level, Strand.class_name)
