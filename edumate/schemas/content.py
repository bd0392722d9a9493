from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


Level = Literal["JHS", "SHS"]


class CurriculumIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    level: Level
    class_name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    course: Optional[str] = None
    pdf_url: str = ""
    thumbnail_url: str = ""


class CurriculumOut(CurriculumIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuizOptions(BaseModel):
    level: Level
    class_name: str
    subject: str
    course: Optional[str] = None
    topic: str
    subtopic: Optional[str] = None
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    time_limit: Optional[int] = Field(default=None, ge=1)


class QuizQuestion(BaseModel):
    id: str
    question: str
    options: list[str]
    correct_answer: int = Field(..., ge=0)
    explanation: str = ""
    type: Literal["multiple-choice", "true-false"] = "multiple-choice"


class QuizIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    options: QuizOptions
    questions: list[QuizQuestion] = []


class QuizOut(QuizIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TextbookOptions(BaseModel):
    level: Level
    class_name: str
    subject: str
    course: Optional[str] = None
    term: Literal["1", "2", "3"]
    publisher: str = ""
    isbn: str = ""
    year: str = ""


class TextbookContent(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    authors: list[str] = []
    cover_url: str = ""
    pdf_url: str = ""
    total_pages: int = Field(default=0, ge=0)
    keywords: list[str] = []


class TextbookIn(BaseModel):
    options: TextbookOptions
    content: TextbookContent


class TextbookOut(TextbookIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LessonOptions(BaseModel):
    level: Level
    class_name: str
    subject: str
    course: Optional[str] = None
    topic: str
    subtopic: Optional[str] = None
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    subject_id: Optional[int] = None
    sub_strand_id: Optional[int] = None


class LessonQuestion(BaseModel):
    type: Literal["multiple_choice"] = "multiple_choice"
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    # The text of the right option, not its index.
    correct_answer: str
    explanation: str = ""

    @model_validator(mode="after")
    def _answer_is_an_option(self):
        if self.correct_answer not in self.options:
            raise ValueError("correct_answer must match one of the options")
        return self


class LessonContent(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    content: str = ""
    video_url: Optional[str] = None
    attachments: list[str] = []
    questions: list[LessonQuestion] = []


class LessonIn(BaseModel):
    options: LessonOptions
    content: LessonContent


class LessonOut(LessonIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LessonNoteIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    level: Level
    class_name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    course: Optional[str] = None
    strand: str = Field(..., min_length=1)
    sub_strand: str = Field(..., min_length=1)
    content_standard: str = Field(..., min_length=1)
    indicator: str = Field(..., min_length=1)
    # When set, subject_id and strand_id are taken from the indicator.
    indicator_id: Optional[int] = None
    pdf_url: str = ""
    thumbnail_url: str = ""
    keywords: list[str] = []


class LessonNoteOut(LessonNoteIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    subject_id: Optional[int] = None
    strand_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Page(BaseModel):
    total: int
    page: int
    page_size: int


class CurriculaResponse(Page):
    items: list[CurriculumOut]


class QuizzesResponse(Page):
    items: list[QuizOut]


class TextbooksResponse(Page):
    items: list[TextbookOut]


class LessonsResponse(Page):
    items: list[LessonOut]


class LessonNotesResponse(Page):
    items: list[LessonNoteOut]
