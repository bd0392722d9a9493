"""Full-document CRUD for curricula, quizzes, textbooks, lessons and lesson notes."""
import logging
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from edumate.models import (
    ContentStandard,
    Curriculum,
    Indicator,
    Lesson,
    LessonNote,
    Quiz,
    Strand,
    Subject,
    SubStrand,
    Textbook,
)


logger = logging.getLogger(__name__)

NOT_FOUND = {
    Curriculum: "Curriculum not found",
    Quiz: "Quiz not found",
    Textbook: "Textbook not found",
    Lesson: "Lesson not found",
    LessonNote: "Lesson note not found",
    Subject: "Subject not found",
    Strand: "Strand not found",
    SubStrand: "Sub-strand not found",
    ContentStandard: "Content standard not found",
    Indicator: "Indicator not found",
}


def get_or_404(db: Session, model, item_id: int):
    item = db.query(model).filter(model.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail=NOT_FOUND.get(model, "Not found"))
    return item


def _values(payload: BaseModel | dict) -> dict:
    return payload if isinstance(payload, dict) else payload.model_dump()


def create_item(db: Session, model, payload: BaseModel | dict):
    item = model(**_values(payload))
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("%s created id=%s", model.__name__, item.id)
    return item


def replace_item(db: Session, item, payload: BaseModel | dict):
    # Full replace: every field comes from the payload, omitted optionals reset to defaults.
    for field, value in _values(payload).items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item) -> None:
    db.delete(item)
    db.commit()
    logger.info("%s deleted id=%s", type(item).__name__, item.id)


def paginate(query: Query, model, page: int, page_size: int) -> tuple[list[Any], int]:
    total = query.count()
    items = (
        query.order_by(model.created_at.desc(), model.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def curriculum_query(db: Session, *, level: str | None = None, subject: str | None = None, class_name: str | None = None) -> Query:
    query = db.query(Curriculum)
    if level:
        query = query.filter(Curriculum.level == level)
    if subject:
        query = query.filter(Curriculum.subject == subject)
    if class_name:
        query = query.filter(Curriculum.class_name == class_name)
    return query


def quiz_query(db: Session, *, level: str | None = None, subject: str | None = None, difficulty: str | None = None) -> Query:
    query = db.query(Quiz)
    if level:
        query = query.filter(Quiz.options["level"].as_string() == level)
    if subject:
        query = query.filter(Quiz.options["subject"].as_string() == subject)
    if difficulty:
        query = query.filter(Quiz.options["difficulty"].as_string() == difficulty)
    return query


def textbook_query(db: Session, *, level: str | None = None, subject: str | None = None, term: str | None = None) -> Query:
    query = db.query(Textbook)
    if level:
        query = query.filter(Textbook.options["level"].as_string() == level)
    if subject:
        query = query.filter(Textbook.options["subject"].as_string() == subject)
    if term:
        query = query.filter(Textbook.options["term"].as_string() == term)
    return query


def _json_search(column, q: str):
    pattern = f"%{q.strip()}%"
    return or_(column["title"].as_string().ilike(pattern), column["description"].as_string().ilike(pattern))


def lesson_query(
    db: Session,
    *,
    level: str | None = None,
    class_name: str | None = None,
    subject: str | None = None,
    difficulty: str | None = None,
    subject_id: int | None = None,
    sub_strand_id: int | None = None,
    q: str | None = None,
) -> Query:
    query = db.query(Lesson)
    for key, value in (("level", level), ("class_name", class_name), ("subject", subject), ("difficulty", difficulty)):
        if value:
            query = query.filter(Lesson.options[key].as_string() == value)
    if subject_id is not None:
        query = query.filter(Lesson.options["subject_id"].as_integer() == subject_id)
    if sub_strand_id is not None:
        query = query.filter(Lesson.options["sub_strand_id"].as_integer() == sub_strand_id)
    if q:
        query = query.filter(_json_search(Lesson.content, q))
    return query


def lesson_note_values(db: Session, payload: BaseModel) -> dict:
    values = payload.model_dump()
    values["subject_id"] = values["strand_id"] = None
    if payload.indicator_id is not None:
        indicator = get_or_404(db, Indicator, payload.indicator_id)
        values["subject_id"] = indicator.subject_id
        values["strand_id"] = indicator.strand_id
    return values


def lesson_note_query(
    db: Session,
    *,
    level: str | None = None,
    class_name: str | None = None,
    course: str | None = None,
    subject: str | None = None,
    subject_id: int | None = None,
    strand_id: int | None = None,
    indicator_id: int | None = None,
    q: str | None = None,
) -> Query:
    query = db.query(LessonNote)
    for column, value in (
        (LessonNote.level, level),
        (LessonNote.class_name, class_name),
        (LessonNote.course, course),
        (LessonNote.subject, subject),
        (LessonNote.subject_id, subject_id),
        (LessonNote.strand_id, strand_id),
        (LessonNote.indicator_id, indicator_id),
    ):
        if value is not None and value != "":
            query = query.filter(column == value)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(LessonNote.title.ilike(pattern), LessonNote.description.ilike(pattern)))
    return query
