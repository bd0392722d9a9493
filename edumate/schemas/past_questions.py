from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ObjectiveQuestion(BaseModel):
    question_number: int
    question: str = ""
    options: list[str] = []
    answer: int = 0
    explanation: str = ""
    marks: Optional[int] = None


class EssaySubQuestion(BaseModel):
    sub_letter: str
    question: str = ""
    marks: int = 0
    marking_points: Optional[list[str]] = None
    sample_answer: Optional[str] = None
    sub_questions: Optional[list[EssaySubQuestion]] = None


class EssayQuestion(BaseModel):
    question_number: int
    question: str = ""
    sub_questions: Optional[list[EssaySubQuestion]] = None
    marks: int = 0
    suggested_time: Optional[str] = None
    marking_scheme: Optional[str] = None
    sample_answer: Optional[str] = None


class ObjectiveSection(BaseModel):
    title: str = ""
    section: str = ""
    instructions: str = ""
    time_allocation: Optional[str] = None
    marks_allocation: Optional[int] = None
    questions: list[ObjectiveQuestion] = []


class EssaySection(BaseModel):
    title: str = ""
    section: str = ""
    instructions: str = ""
    time_allocation: Optional[str] = None
    marks_allocation: Optional[int] = None
    question_selection: Optional[str] = None
    questions: list[EssayQuestion] = []


class Paper1(BaseModel):
    title: str = ""
    sections: list[ObjectiveSection] = []
    total_marks: int = 0
    duration: str = "2 hours"
    instructions: str = (
        "Answer ALL questions. Each question carries 1 mark. Choose the letter (A, B, C, or D) "
        "that corresponds to the correct answer and shade it completely on your answer sheet."
    )


class Paper2(BaseModel):
    title: str = ""
    sections: list[EssaySection] = []
    total_marks: int = 0
    duration: str = "1 hour 30 minutes"
    instructions: str = "Answer ALL questions in this section."
    general_instructions: Optional[str] = "Write your answers in the spaces provided. Show all working where necessary."


class PaperStructure(BaseModel):
    paper_1: Optional[Paper1] = None
    paper_2: Optional[Paper2] = None


class PastQuestionPaperIn(BaseModel):
    exam_type: str = Field(..., min_length=1, max_length=32)
    subject_name: str = Field(..., min_length=1, max_length=128)
    subject_id: str = Field(..., min_length=1, max_length=64)
    year: int
    course: Optional[str] = None
    level: str = Field(..., min_length=1, max_length=8)
    coin_price: int = 0
    has_paper_1: bool = True
    has_paper_2: bool = False
    questions: PaperStructure = PaperStructure()


class PastQuestionPaperOut(PastQuestionPaperIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    questions_count: int = 0
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PastQuestionsResponse(BaseModel):
    items: list[PastQuestionPaperOut]
    total: int
    page: int
    page_size: int


class PastQuestionOptions(BaseModel):
    exam_types: list[str]
    years: list[int]
    courses: list[str]


class CountItem(BaseModel):
    label: str
    count: int


class PastQuestionStats(BaseModel):
    total_papers: int
    total_subjects: int
    popular_subjects: list[CountItem]
    yearly_distribution: list[CountItem]


class DuplicatePaperRequest(BaseModel):
    year: int


class ReorderRequest(BaseModel):
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str]


# Section / question edits arrive as loose dicts: their shape depends on the paper number.
SectionPayload = dict[str, Any]
QuestionPayload = dict[str, Any]
