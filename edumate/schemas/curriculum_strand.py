from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from edumate.schemas.content import Level, Page


class _Node(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubjectIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    level: Level
    course: Optional[str] = None


class SubjectOut(_Node, SubjectIn):
    pass


class StrandIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    subject_id: int
    class_name: str = Field(..., min_length=1)
    # Falls back to the subject's course.
    course: Optional[str] = None


class StrandOut(_Node, StrandIn):
    level: str


class SubStrandIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    strand_id: int


class SubStrandOut(_Node, SubStrandIn):
    subject_id: int


class ContentStandardIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=512)
    sub_strand_id: int


class ContentStandardOut(_Node, ContentStandardIn):
    strand_id: int
    subject_id: int
    level: str
    class_name: str
    course: Optional[str] = None


class IndicatorIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=512)
    content_standard_id: int


class IndicatorOut(_Node, IndicatorIn):
    sub_strand_id: int
    strand_id: int
    subject_id: int
    level: str
    class_name: str
    course: Optional[str] = None


class BulkDeleteRequest(BaseModel):
    ids: list[int] = Field(..., min_length=1, max_length=200)


class BulkDeleteResponse(BaseModel):
    deleted: int


class SubjectsResponse(Page):
    items: list[SubjectOut]


class StrandsResponse(Page):
    items: list[StrandOut]


class SubStrandsResponse(Page):
    items: list[SubStrandOut]


class ContentStandardsResponse(Page):
    items: list[ContentStandardOut]


class IndicatorsResponse(Page):
    items: list[IndicatorOut]
