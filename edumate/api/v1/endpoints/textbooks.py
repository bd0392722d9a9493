from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import Textbook
from edumate.schemas.auth import Message
from edumate.schemas.content import TextbookIn, TextbookOut, TextbooksResponse
from edumate.services.content import create_item, delete_item, get_or_404, paginate, replace_item, textbook_query

router = APIRouter()


@router.get("", response_model=TextbooksResponse)
def list_textbooks(
    level: Optional[str] = None,
    subject: Optional[str] = None,
    term: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = textbook_query(db, level=level, subject=subject, term=term)
    items, total = paginate(query, Textbook, page, page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("", response_model=TextbookOut, status_code=201)
def create_textbook(payload: TextbookIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return create_item(db, Textbook, payload)


@router.get("/{textbook_id}", response_model=TextbookOut)
def get_textbook(textbook_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return get_or_404(db, Textbook, textbook_id)


@router.put("/{textbook_id}", response_model=TextbookOut)
def replace_textbook(textbook_id: int, payload: TextbookIn, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return replace_item(db, get_or_404(db, Textbook, textbook_id), payload)


@router.delete("/{textbook_id}", response_model=Message)
def delete_textbook(textbook_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
    delete_item(db, get_or_404(db, Textbook, textbook_id))
    return Message(message="Textbook deleted")
