from dataclasses import asdict, dataclass
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import ContentStandard, Indicator, Strand, Subject, SubStrand
from edumate.schemas.auth import Message
from edumate.schemas.curriculum_strand import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ContentStandardIn,
    ContentStandardOut,
    ContentStandardsResponse,
    IndicatorIn,
    IndicatorOut,
    IndicatorsResponse,
    StrandIn,
    StrandOut,
    StrandsResponse,
    SubjectIn,
    SubjectOut,
    SubjectsResponse,
    SubStrandIn,
    SubStrandOut,
    SubStrandsResponse,
)
from edumate.services.content import get_or_404, paginate
from edumate.services.curriculum_strands import create_node, delete_nodes, node_query, replace_node


@dataclass
class SubjectFilters:
    level: Optional[str] = None
    course: Optional[str] = None
    q: Optional[str] = None


@dataclass
class StrandFilters:
    subject_id: Optional[int] = None
    level: Optional[str] = None
    class_name: Optional[str] = None
    course: Optional[str] = None
    q: Optional[str] = None


@dataclass
class SubStrandFilters:
    strand_id: Optional[int] = None
    subject_id: Optional[int] = None
    q: Optional[str] = None


@dataclass
class ContentStandardFilters:
    sub_strand_id: Optional[int] = None
    strand_id: Optional[int] = None
    subject_id: Optional[int] = None
    level: Optional[str] = None
    class_name: Optional[str] = None
    q: Optional[str] = None


@dataclass
class IndicatorFilters:
    content_standard_id: Optional[int] = None
    sub_strand_id: Optional[int] = None
    strand_id: Optional[int] = None
    subject_id: Optional[int] = None
    level: Optional[str] = None
    class_name: Optional[str] = None
    q: Optional[str] = None


def _node_router(model, schema_in, schema_out, page_schema, filters_cls, label: str) -> APIRouter:
    router = APIRouter()

    @router.get("", response_model=page_schema)
    def list_nodes(
        filters=Depends(filters_cls),
        page: int = Query(1, ge=1),
        page_size: int = Query(50, ge=1, le=200),
        admin=Depends(require_admin),
        db: Session = Depends(get_db),
    ):
        items, total = paginate(node_query(db, model, **asdict(filters)), model, page, page_size)
        return {"items": items, "total": total, "page": page, "page_size": page_size}

    @router.post("", response_model=schema_out, status_code=201)
    def create_one(payload: schema_in, admin=Depends(require_admin), db: Session = Depends(get_db)):
        return create_node(db, model, payload)

    @router.post("/bulk-delete", response_model=BulkDeleteResponse)
    def bulk_delete(payload: BulkDeleteRequest, admin=Depends(require_admin), db: Session = Depends(get_db)):
        return BulkDeleteResponse(deleted=delete_nodes(db, model, payload.ids))

    @router.get("/{node_id}", response_model=schema_out)
    def get_one(node_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
        return get_or_404(db, model, node_id)

    @router.put("/{node_id}", response_model=schema_out)
    def replace_one(node_id: int, payload: schema_in, admin=Depends(require_admin), db: Session = Depends(get_db)):
        return replace_node(db, get_or_404(db, model, node_id), payload)

    @router.delete("/{node_id}", response_model=Message)
    def delete_one(node_id: int, admin=Depends(require_admin), db: Session = Depends(get_db)):
        delete_nodes(db, model, [get_or_404(db, model, node_id).id])
        return Message(message=f"{label} deleted")

    return router


subjects = _node_router(Subject, SubjectIn, SubjectOut, SubjectsResponse, SubjectFilters, "Subject")
strands = _node_router(Strand, StrandIn, StrandOut, StrandsResponse, StrandFilters, "Strand")
sub_strands = _node_router(SubStrand, SubStrandIn, SubStrandOut, SubStrandsResponse, SubStrandFilters, "Sub-strand")
content_standards = _node_router(
    ContentStandard,
    ContentStandardIn,
    ContentStandardOut,
    ContentStandardsResponse,
    ContentStandardFilters,
    "Content standard",
)
indicators = _node_router(Indicator, IndicatorIn, IndicatorOut, IndicatorsResponse, IndicatorFilters, "Indicator")
