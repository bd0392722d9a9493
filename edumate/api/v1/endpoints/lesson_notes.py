from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import LessonNote
from edumate.schemas.auth import Message
from edumate.schemas.content import LessonNoteIn, LessonNoteOut, LessonNotesResponse
from edumate.services.content import (
    create_item,
    delete_item,
    get_or_404,
    lesson_note_query,
    lesson_note_values,
    paginate,
    replace_item,
)

router = APIRouter()


@router.get("", response_model=LessonNotesResponse)
def list_lesson_notes(
    level: Optional[str] = None,
    class_name: Optional[str] = None,
    course: Optional[str] = None,
    subject: Optional[str] = None,
    subject_id: Optional[int] = None,
    strand_id: Optional[int] = None,
    indicator_id: Optional[int] = None,
    q: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = lesson_note_query(
        db,
        level=level,
        class_name=class_name,
        course=course,
        subject=subject,
        subject_id=subject_id,
        strand_id=strand_id,
        indicator_id=indicator_id,
        q=q,
    )
    items, total = paginate(query, LessonNote, page, page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=LessonNoteOut, status_code=201)
def create_lesson_note(payload: LessonNoteIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return create_item(db, LessonNote, lesson_note_values(db, payload))


@router.get("/{note_id}", response_model=LessonNoteOut)
def get_lesson_note(note_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return get_or_404(db, LessonNote, note_id)


@router.put("/{note_id}", response_model=LessonNoteOut)
def replace_lesson_note(note_id: int, payload: LessonNoteIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    item = get_or_404(db, LessonNote, note_id)
    return replace_item(db, item, lesson_note_values(db, payload))


@router.delete("/{note_id}", response_model=Message)
def delete_lesson_note(note_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    delete_item(db, get_or_404(db, LessonNote, note_id))
    return Message(message="Lesson note deleted")
