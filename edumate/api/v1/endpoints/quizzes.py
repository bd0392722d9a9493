from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import Quiz
from edumate.schemas.auth import Message
from edumate.schemas.content import QuizIn, QuizOut, QuizzesResponse
from edumate.services.content import create_item, delete_item, get_or_404, paginate, quiz_query, replace_item

router = APIRouter()


@router.get("", response_model=QuizzesResponse)
def list_quizzes(
    level: Optional[str] = None,
    subject: Optional[str] = None,
    difficulty: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = quiz_query(db, level=level, subject=subject, difficulty=difficulty)
    items, total = paginate(query, Quiz, page, page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=QuizOut, status_code=201)
def create_quiz(payload: QuizIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return create_item(db, Quiz, payload)


@router.get("/{quiz_id}", response_model=QuizOut)
def get_quiz(quiz_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return get_or_404(db, Quiz, quiz_id)


@router.put("/{quiz_id}", response_model=QuizOut)
def replace_quiz(quiz_id: int, payload: QuizIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return replace_item(db, get_or_404(db, Quiz, quiz_id), payload)


@router.delete("/{quiz_id}", response_model=Message)
def delete_quiz(quiz_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    delete_item(db, get_or_404(db, Quiz, quiz_id))
    return Message(message="Quiz deleted")
