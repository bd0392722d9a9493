"""Past-question papers: nested section/question edits and paper bookkeeping.

A paper's ``questions`` column holds ``{"paper_1": {...}, "paper_2": {...}}``. Every
edit below works on a deep copy of that document and returns the new document; the
caller writes it back as a whole (JSON columns do not track in-place mutation).
"""
import copy
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from edumate.models import PastQuestionPaper
from edumate.schemas.past_questions import (
    EssayQuestion,
    EssaySection,
    ObjectiveQuestion,
    ObjectiveSection,
    Paper1,
    Paper2,
    PastQuestionPaperIn,
)


logger = logging.getLogger(__name__)

PAPER_KEYS = {1: "paper_1", 2: "paper_2"}
PAPER_MODELS: dict[int, type[BaseModel]] = {1: Paper1, 2: Paper2}
SECTION_MODELS: dict[int, type[BaseModel]] = {1: ObjectiveSection, 2: EssaySection}
QUESTION_MODELS: dict[int, type[BaseModel]] = {1: ObjectiveQuestion, 2: EssayQuestion}
MIN_YEAR = 2000


def _paper_key(paper_number: int) -> str:
    try:
        return PAPER_KEYS[paper_number]
    except KeyError:
        raise HTTPException(status_code=400, detail="Paper number must be 1 or 2")


def _validated(model: type[BaseModel], data: Any) -> dict:
    try:
        return model.model_validate(data).model_dump(exclude_none=True)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))


def _sections(structure: dict, paper_number: int) -> list:
    paper = structure.get(_paper_key(paper_number))
    if not paper:
        raise HTTPException(status_code=404, detail=f"Paper {paper_number} structure not found")
    return paper.setdefault("sections", [])


def _check_index(items: list, index: int, label: str) -> None:
    if index < 0 or index >= len(items):
        raise HTTPException(status_code=404, detail=f"{label} not found")


def _move(items: list, from_index: int, to_index: int, label: str) -> None:
    _check_index(items, from_index, label)
    _check_index(items, to_index, label)
    items.insert(to_index, items.pop(from_index))


def add_section(structure: dict, paper_number: int, section: dict) -> dict:
    updated = copy.deepcopy(structure or {})
    key = _paper_key(paper_number)
    if not updated.get(key):
        updated[key] = PAPER_MODELS[paper_number]().model_dump(exclude_none=True)
    updated[key].setdefault("sections", []).append(_validated(SECTION_MODELS[paper_number], section))
    return updated


def update_section(structure: dict, paper_number: int, section_index: int, updates: dict) -> dict:
    updated = copy.deepcopy(structure or {})
    sections = _sections(updated, paper_number)
    _check_index(sections, section_index, "Section")
    sections[section_index] = _validated(SECTION_MODELS[paper_number], {**sections[section_index], **updates})
    return updated


def delete_section(structure: dict, paper_number: int, section_index: int) -> dict:
    updated = copy.deepcopy(structure or {})
    sections = _sections(updated, paper_number)
    _check_index(sections, section_index, "Section")
    del sections[section_index]
    return updated


def reorder_sections(structure: dict, paper_number: int, from_index: int, to_index: int) -> dict:
    updated = copy.deepcopy(structure or {})
    _move(_sections(updated, paper_number), from_index, to_index, "Section")
    return updated


def _questions(structure: dict, paper_number: int, section_index: int) -> list:
    sections = _sections(structure, paper_number)
    _check_index(sections, section_index, "Section")
    return sections[section_index].setdefault("questions", [])


def add_question(structure: dict, paper_number: int, section_index: int, question: dict) -> dict:
    updated = copy.deepcopy(structure or {})
    questions = _questions(updated, paper_number, section_index)
    questions.append(_validated(QUESTION_MODELS[paper_number], question))
    return updated


def update_question(structure: dict, paper_number: int, section_index: int, question_index: int, updates: dict) -> dict:
    updated = copy.deepcopy(structure or {})
    questions = _questions(updated, paper_number, section_index)
    _check_index(questions, question_index, "Question")
    questions[question_index] = _validated(QUESTION_MODELS[paper_number], {**questions[question_index], **updates})
    return updated


def delete_question(structure: dict, paper_number: int, section_index: int, question_index: int) -> dict:
    updated = copy.deepcopy(structure or {})
    questions = _questions(updated, paper_number, section_index)
    _check_index(questions, question_index, "Question")
    del questions[question_index]
    return updated


def reorder_questions(structure: dict, paper_number: int, section_index: int, from_index: int, to_index: int) -> dict:
    updated = copy.deepcopy(structure or {})
    _move(_questions(updated, paper_number, section_index), from_index, to_index, "Question")
    return updated


def replace_questions(structure: dict, paper_number: int, section_index: int, questions: list[dict]) -> dict:
    updated = copy.deepcopy(structure or {})
    sections = _sections(updated, paper_number)
    _check_index(sections, section_index, "Section")
    model = QUESTION_MODELS[paper_number]
    sections[section_index]["questions"] = [_validated(model, item) for item in questions]
    return updated


def calculate_total_marks(structure: dict, paper_number: int) -> int:
    paper = (structure or {}).get(_paper_key(paper_number))
    if not paper:
        return 0
    total = 0
    for section in paper.get("sections") or []:
        questions = section.get("questions") or []
        if paper_number == 1:
            # Objective papers carry one mark per question.
            total += len(questions)
            continue
        for question in questions:
            sub_questions = question.get("sub_questions") or []
            if sub_questions:
                total += sum(int(sub.get("marks") or 0) for sub in sub_questions)
            else:
                total += int(question.get("marks") or 0)
    return total


def count_questions(structure: dict) -> int:
    count = 0
    for key in PAPER_KEYS.values():
        paper = (structure or {}).get(key) or {}
        for section in paper.get("sections") or []:
            count += len(section.get("questions") or [])
    return count


def recalculate(structure: dict) -> dict:
    updated = copy.deepcopy(structure or {})
    for number, key in PAPER_KEYS.items():
        if updated.get(key):
            updated[key]["total_marks"] = calculate_total_marks(updated, number)
    return updated


def _section_errors(label: str, sections: list, paper_number: int) -> list[str]:
    errors = []
    for s_index, section in enumerate(sections, start=1):
        prefix = f"{label} Section {s_index}"
        if not section.get("title"):
            errors.append(f"{prefix}: Title is required")
        if not section.get("section"):
            errors.append(f"{prefix}: Section identifier is required")
        questions = section.get("questions") or []
        if not questions:
            errors.append(f"{prefix}: At least one question is required")
        for q_index, question in enumerate(questions, start=1):
            q_prefix = f"{prefix} Question {q_index}"
            if not question.get("question"):
                errors.append(f"{q_prefix}: Question text is required")
            if paper_number == 1:
                options = question.get("options") or []
                if len(options) < 2:
                    errors.append(f"{q_prefix}: At least 2 options are required")
                answer = question.get("answer")
                if not isinstance(answer, int) or answer < 0 or answer >= len(options):
                    errors.append(f"{q_prefix}: Invalid answer index")
                continue
            if not question.get("marks") or question["marks"] <= 0:
                errors.append(f"{q_prefix}: Valid marks allocation is required")
            for sub in question.get("sub_questions") or []:
                sub_prefix = f"{q_prefix} Sub-question {sub.get('sub_letter')}"
                if not sub.get("question"):
                    errors.append(f"{sub_prefix}: Question text is required")
                if not sub.get("marks") or sub["marks"] <= 0:
                    errors.append(f"{sub_prefix}: Valid marks allocation is required")
    return errors


def validate_paper(paper: PastQuestionPaper, current_year: int | None = None) -> list[str]:
    if current_year is None:
        current_year = datetime.now(timezone.utc).year
    errors = []
    if not paper.exam_type:
        errors.append("Exam type is required")
    if not paper.subject_name:
        errors.append("Subject name is required")
    if not paper.subject_id:
        errors.append("Subject ID is required")
    if not paper.year or paper.year < MIN_YEAR or paper.year > current_year + 1:
        errors.append("Valid year is required")
    if not paper.level:
        errors.append("Level is required")
    if (paper.coin_price or 0) < 0:
        errors.append("Coin price cannot be negative")

    structure = paper.questions or {}
    if paper.has_paper_1 and not structure.get("paper_1"):
        errors.append("Paper 1 structure is missing")
    if paper.has_paper_2 and not structure.get("paper_2"):
        errors.append("Paper 2 structure is missing")
    if structure.get("paper_1"):
        errors.extend(_section_errors("Paper 1", structure["paper_1"].get("sections") or [], 1))
    if structure.get("paper_2"):
        errors.extend(_section_errors("Paper 2", structure["paper_2"].get("sections") or [], 2))
    return errors


def get_paper_or_404(db: Session, paper_id: int) -> PastQuestionPaper:
    paper = db.query(PastQuestionPaper).filter(PastQuestionPaper.id == paper_id).first()
    if not paper:
        raise HTTPException(status_code=404, detail="Past question paper not found")
    return paper


def _apply_payload(paper: PastQuestionPaper, payload: PastQuestionPaperIn) -> None:
    data = payload.model_dump(exclude={"questions"})
    for field, value in data.items():
        setattr(paper, field, value)
    structure = recalculate(payload.questions.model_dump(exclude_none=True))
    paper.questions = structure
    paper.questions_count = count_questions(structure)


def create_paper(db: Session, payload: PastQuestionPaperIn, created_by: str | None = None) -> PastQuestionPaper:
    paper = PastQuestionPaper(created_by=created_by)
    _apply_payload(paper, payload)
    db.add(paper)
    db.commit()
    db.refresh(paper)
    logger.info("Past question paper created id=%s %s %s %s", paper.id, paper.exam_type, paper.subject_name, paper.year)
    return paper


def replace_paper(db: Session, paper: PastQuestionPaper, payload: PastQuestionPaperIn) -> PastQuestionPaper:
    _apply_payload(paper, payload)
    db.commit()
    db.refresh(paper)
    return paper


def save_structure(db: Session, paper: PastQuestionPaper, structure: dict) -> PastQuestionPaper:
    structure = recalculate(structure)
    paper.questions = structure
    paper.questions_count = count_questions(structure)
    db.commit()
    db.refresh(paper)
    return paper


def duplicate_paper(db: Session, paper: PastQuestionPaper, year: int, created_by: str | None = None) -> PastQuestionPaper:
    clone = PastQuestionPaper(
        exam_type=paper.exam_type,
        subject_name=paper.subject_name,
        subject_id=paper.subject_id,
        year=year,
        course=paper.course,
        level=paper.level,
        questions_count=paper.questions_count,
        coin_price=paper.coin_price,
        has_paper_1=paper.has_paper_1,
        has_paper_2=paper.has_paper_2,
        questions=copy.deepcopy(paper.questions or {}),
        created_by=created_by or paper.created_by,
    )
    db.add(clone)
    db.commit()
    db.refresh(clone)
    return clone


def list_papers(
    db: Session,
    *,
    exam_type: str | None = None,
    subject: str | None = None,
    year: int | None = None,
    level: str | None = None,
    course: str | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[PastQuestionPaper], int]:
    query = db.query(PastQuestionPaper)
    if exam_type:
        query = query.filter(PastQuestionPaper.exam_type == exam_type)
    if subject:
        query = query.filter(PastQuestionPaper.subject_name == subject)
    if year:
        query = query.filter(PastQuestionPaper.year == year)
    if level:
        query = query.filter(PastQuestionPaper.level == level)
    if course:
        query = query.filter(PastQuestionPaper.course == course)
    term = (search or "").strip()
    if term:
        clauses = [
            PastQuestionPaper.subject_name.ilike(f"%{term}%"),
            PastQuestionPaper.exam_type.ilike(f"%{term}%"),
        ]
        if term.isdigit():
            clauses.append(PastQuestionPaper.year == int(term))
        query = query.filter(or_(*clauses))

    total = query.count()
    items = (
        query.order_by(PastQuestionPaper.created_at.desc(), PastQuestionPaper.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def paper_options(db: Session) -> dict:
    exam_types = [row[0] for row in db.query(PastQuestionPaper.exam_type).distinct().all() if row[0]]
    years = [row[0] for row in db.query(PastQuestionPaper.year).distinct().all() if row[0]]
    courses = [row[0] for row in db.query(PastQuestionPaper.course).distinct().all() if row[0]]
    return {
        "exam_types": sorted(exam_types),
        "years": sorted(years, reverse=True),
        "courses": sorted(courses),
    }


def paper_stats(db: Session) -> dict:
    total_papers = db.query(func.count(PastQuestionPaper.id)).scalar() or 0
    total_subjects = db.query(func.count(func.distinct(PastQuestionPaper.subject_id))).scalar() or 0
    by_subject = (
        db.query(PastQuestionPaper.subject_name, func.count(PastQuestionPaper.id))
        .group_by(PastQuestionPaper.subject_name)
        .order_by(func.count(PastQuestionPaper.id).desc())
        .limit(10)
        .all()
    )
    by_year = (
        db.query(PastQuestionPaper.year, func.count(PastQuestionPaper.id))
        .group_by(PastQuestionPaper.year)
        .order_by(PastQuestionPaper.year.desc())
        .all()
    )
    return {
        "total_papers": int(total_papers),
        "total_subjects": int(total_subjects),
        "popular_subjects": [{"label": str(name), "count": int(count)} for name, count in by_subject],
        "yearly_distribution": [{"label": str(year), "count": int(count)} for year, count in by_year],
    }
