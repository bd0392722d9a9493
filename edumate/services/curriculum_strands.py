"""Subject > strand > sub-strand > content standard > indicator.

Each node is created under an existing parent and copies its ancestry (ids,
level, class, course) from it, so a node can be listed by any ancestor without
joins. Replacing a node re-copies that ancestry down to every descendant.
Deleting a node deletes its whole subtree.
"""
import logging

from pydantic import BaseModel
from sqlalchemy.orm import Query, Session, object_session

from edumate.models import ContentStandard, Indicator, Strand, Subject, SubStrand
from edumate.services.content import get_or_404


logger = logging.getLogger(__name__)

PARENTS = {
    Strand: (Subject, "subject_id"),
    SubStrand: (Strand, "strand_id"),
    ContentStandard: (SubStrand, "sub_strand_id"),
    Indicator: (ContentStandard, "content_standard_id"),
}

CHILDREN = {
    Subject: "strands",
    Strand: "sub_strands",
    SubStrand: "content_standards",
    ContentStandard: "indicators",
}


def _inherit(node, parent) -> None:
    if isinstance(node, Strand):
        node.level = parent.level
        node.course = node.course or parent.course
    elif isinstance(node, SubStrand):
        node.subject_id = parent.subject_id
    elif isinstance(node, ContentStandard):
        strand = object_session(parent).get(Strand, parent.strand_id)
        node.strand_id = strand.id
        node.subject_id = strand.subject_id
        node.level = strand.level
        node.class_name = strand.class_name
        node.course = strand.course
    elif isinstance(node, Indicator):
        node.sub_strand_id = parent.sub_strand_id
        node.strand_id = parent.strand_id
        node.subject_id = parent.subject_id
        node.level = parent.level
        node.class_name = parent.class_name
        node.course = parent.course


def _propagate(node) -> None:
    attr = CHILDREN.get(type(node))
    if not attr:
        return
    for child in getattr(node, attr):
        _inherit(child, node)
        _propagate(child)


def _parent_of(db: Session, model, payload: BaseModel):
    if model not in PARENTS:
        return None
    parent_model, key = PARENTS[model]
    return get_or_404(db, parent_model, getattr(payload, key))


def create_node(db: Session, model, payload: BaseModel):
    parent = _parent_of(db, model, payload)
    node = model(**payload.model_dump())
    if parent is not None:
        _inherit(node, parent)
    db.add(node)
    db.commit()
    db.refresh(node)
    logger.info("%s created id=%s", model.__name__, node.id)
    return node


def replace_node(db: Session, node, payload: BaseModel):
    parent = _parent_of(db, type(node), payload)
    for field, value in payload.model_dump().items():
        setattr(node, field, value)
    if parent is not None:
        _inherit(node, parent)
    _propagate(node)
    db.commit()
    db.refresh(node)
    return node


def delete_nodes(db: Session, model, ids: list[int]) -> int:
    nodes = db.query(model).filter(model.id.in_(ids)).all()
    for node in nodes:
        db.delete(node)
    db.commit()
    logger.info("%s bulk delete requested=%s deleted=%s", model.__name__, len(ids), len(nodes))
    return len(nodes)


def node_query(db: Session, model, *, q: str | None = None, **filters) -> Query:
    query = db.query(model)
    for field, value in filters.items():
        if value is not None and value != "":
            query = query.filter(getattr(model, field) == value)
    if q:
        query = query.filter(model.name.ilike(f"%{q.strip()}%"))
    # paginate() appends newest-first as the tie-breaker.
    return query.order_by(model.name)
