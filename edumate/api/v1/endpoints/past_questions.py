from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import User
from edumate.schemas.auth import Message
from edumate.schemas.past_questions import (
    DuplicatePaperRequest,
    PastQuestionOptions,
    PastQuestionPaperIn,
    PastQuestionPaperOut,
    PastQuestionStats,
    PastQuestionsResponse,
    QuestionPayload,
    ReorderRequest,
    SectionPayload,
    ValidationReport,
)
from edumate.services import past_questions as papers

router = APIRouter()


@router.get("", response_model=PastQuestionsResponse)
def list_past_questions(
    exam_type: Optional[str] = None,
    subject: Optional[str] = None,
    year: Optional[int] = None,
    level: Optional[str] = None,
    course: Optional[str] = None,
    q: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    items, total = papers.list_papers(
        db,
        exam_type=exam_type,
        subject=subject,
        year=year,
        level=level,
        course=course,
        search=q,
        page=page,
        page_size=page_size,
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/options", response_model=PastQuestionOptions)
def past_question_options(admin=Depends(require_admin), db: Session = Depends(get_db)):
    return papers.paper_options(db)


@router.get("/stats", response_model=PastQuestionStats)
def past_question_stats(admin=Depends(require_admin), db: Session = Depends(get_db)):
    return papers.paper_stats(db)


@router.post("", response_model=PastQuestionPaperOut, status_code=201)
def create_past_question(payload: PastQuestionPaperIn, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return papers.create_paper(db, payload, created_by=admin.id)


@router.get("/{paper_id}", response_model=PastQuestionPaperOut)
def get_past_question(paper_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return papers.get_paper_or_404(db, paper_id)


@router.put("/{paper_id}", response_model=PastQuestionPaperOut)
def replace_past_question(paper_id: int, payload: PastQuestionPaperIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return papers.replace_paper(db, papers.get_paper_or_404(db, paper_id), payload)


@router.delete("/{paper_id}", response_model=Message)
def delete_past_question(paper_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    paper = papers.get_paper_or_404(db, paper_id)
    db.delete(paper)
    db.commit()
    return Message(message="Past question paper deleted")


@router.post("/{paper_id}/duplicate", response_model=PastQuestionPaperOut, status_code=201)
def duplicate_past_question(
    paper_id: int,
    payload: DuplicatePaperRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return papers.duplicate_paper(db, papers.get_paper_or_404(db, paper_id), payload.year, created_by=admin.id)


@router.get("/{paper_id}/validate", response_model=ValidationReport)
def validate_past_question(paper_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    errors = papers.validate_paper(papers.get_paper_or_404(db, paper_id))
    return {"valid": not errors, "errors": errors}


# Structural edits. Each loads the paper, applies one copy-on-write edit and saves the document.

@router.post("/{paper_id}/papers/{paper_number}/sections", response_model=PastQuestionPaperOut)
def add_section(
    paper_id: int,
    paper_number: int,
    section: SectionPayload = Body(...),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    return papers.save_structure(db, paper, papers.add_section(paper.questions, paper_number, section))


@router.patch("/{paper_id}/papers/{paper_number}/sections/{section_index}", response_model=PastQuestionPaperOut)
def update_section(
    paper_id: int,
    paper_number: int,
    section_index: int,
    updates: SectionPayload = Body(...),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    return papers.save_structure(db, paper, papers.update_section(paper.questions, paper_number, section_index, updates))


@router.delete("/{paper_id}/papers/{paper_number}/sections/{section_index}", response_model=PastQuestionPaperOut)
def delete_section(paper_id: int, paper_number: int, section_index: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    paper = papers.get_paper_or_404(db, paper_id)
    return papers.save_structure(db, paper, papers.delete_section(paper.questions, paper_number, section_index))


@router.post("/{paper_id}/papers/{paper_number}/sections/reorder", response_model=PastQuestionPaperOut)
def reorder_sections(
    paper_id: int,
    paper_number: int,
    payload: ReorderRequest,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    structure = papers.reorder_sections(paper.questions, paper_number, payload.from_index, payload.to_index)
    return papers.save_structure(db, paper, structure)


@router.post("/{paper_id}/papers/{paper_number}/sections/{section_index}/questions", response_model=PastQuestionPaperOut)
def add_question(
    paper_id: int,
    paper_number: int,
    section_index: int,
    question: QuestionPayload = Body(...),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    return papers.save_structure(db, paper, papers.add_question(paper.questions, paper_number, section_index, question))


@router.put("/{paper_id}/papers/{paper_number}/sections/{section_index}/questions", response_model=PastQuestionPaperOut)
def replace_questions(
    paper_id: int,
    paper_number: int,
    section_index: int,
    questions: list[QuestionPayload] = Body(...),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    structure = papers.replace_questions(paper.questions, paper_number, section_index, questions)
    return papers.save_structure(db, paper, structure)


@router.post("/{paper_id}/papers/{paper_number}/sections/{section_index}/questions/reorder", response_model=PastQuestionPaperOut)
def reorder_questions(
    paper_id: int,
    paper_number: int,
    section_index: int,
    payload: ReorderRequest,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    structure = papers.reorder_questions(paper.questions, paper_number, section_index, payload.from_index, payload.to_index)
    return papers.save_structure(db, paper, structure)


@router.patch(
    "/{paper_id}/papers/{paper_number}/sections/{section_index}/questions/{question_index}",
    response_model=PastQuestionPaperOut,
)
def update_question(
    paper_id: int,
    paper_number: int,
    section_index: int,
    question_index: int,
    updates: QuestionPayload = Body(...),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    structure = papers.update_question(paper.questions, paper_number, section_index, question_index, updates)
    return papers.save_structure(db, paper, structure)


@router.delete(
    "/{paper_id}/papers/{paper_number}/sections/{section_index}/questions/{question_index}",
    response_model=PastQuestionPaperOut,
)
def delete_question(
    paper_id: int,
    paper_number: int,
    section_index: int,
    question_index: int,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    paper = papers.get_paper_or_404(db, paper_id)
    structure = papers.delete_question(paper.questions, paper_number, section_index, question_index)
    return papers.save_structure(db, paper, structure)
