from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import Curriculum
from edumate.schemas.auth import Message
from edumate.schemas.content import CurriculumIn, CurriculumOut, CurriculaResponse
from edumate.services.content import create_item, curriculum_query, delete_item, get_or_404, paginate, replace_item

router = APIRouter()


@router.get("", response_model=CurriculaResponse)
def list_curricula(
    level: Optional[str] = None,
    subject: Optional[str] = None,
    class_name: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = curriculum_query(db, level=level, subject=subject, class_name=class_name)
    items, total = paginate(query, Curriculum, page, page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=CurriculumOut, status_code=201)
def create_curriculum(payload: CurriculumIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return create_item(db, Curriculum, payload)


@router.get("/{curriculum_id}", response_model=CurriculumOut)
def get_curriculum(curriculum_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return get_or_404(db, Curriculum, curriculum_id)


@router.put("/{curriculum_id}", response_model=CurriculumOut)
def replace_curriculum(curriculum_id: int, payload: CurriculumIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    item = get_or_404(db, Curriculum, curriculum_id)
    return replace_item(db, item, payload)


@router.delete("/{curriculum_id}", response_model=Message)
def delete_curriculum(curriculum_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    delete_item(db, get_or_404(db, Curriculum, curriculum_id))
    return Message(message="Curriculum deleted")
