from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import Lesson
from edumate.schemas.auth import Message
from edumate.schemas.content import LessonIn, LessonOut, LessonsResponse
from edumate.services.content import create_item, delete_item, get_or_404, lesson_query, paginate, replace_item

router = APIRouter()


@router.get("", response_model=LessonsResponse)
def list_lessons(
    level: Optional[str] = None,
    class_name: Optional[str] = None,
    subject: Optional[str] = None,
    difficulty: Optional[str] = None,
    subject_id: Optional[int] = None,
    sub_strand_id: Optional[int] = None,
    q: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = lesson_query(
        db,
        level=level,
        class_name=class_name,
        subject=subject,
        difficulty=difficulty,
        subject_id=subject_id,
        sub_strand_id=sub_strand_id,
        q=q,
    )
    items, total = paginate(query, Lesson, page, page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=LessonOut, status_code=201)
def create_lesson(payload: LessonIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return create_item(db, Lesson, payload)


@router.get("/{lesson_id}", response_model=LessonOut)
def get_lesson(lesson_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return get_or_404(db, Lesson, lesson_id)


@router.put("/{lesson_id}", response_model=LessonOut)
def replace_lesson(lesson_id: int, payload: LessonIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return replace_item(db, get_or_404(db, Lesson, lesson_id), payload)


@router.delete("/{lesson_id}", response_model=Message)
def delete_lesson(lesson_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    delete_item(db, get_or_404(db, Lesson, lesson_id))
    return Message(message="Lesson deleted")
