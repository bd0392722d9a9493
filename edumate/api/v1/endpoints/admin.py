from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.dependencies import require_admin
from edumate.models import PaymentStatus, PaymentTransaction
from edumate.schemas.admin import CoinBalanceOut, DashboardStats
from edumate.schemas.payments import PaymentTransactionsResponse
from edumate.services.coins import get_coin_balance
from edumate.services.dashboard import dashboard_stats

router = APIRouter()


def _coerce_status(value: Optional[str]) -> Optional[PaymentStatus]:
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None
    for member in PaymentStatus:
        if raw.lower() == member.value.lower() or raw.upper() == member.name:
            return member
    raise HTTPException(status_code=400, detail="Invalid status")


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    range_key: str = Query("30d", alias="range"),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    return dashboard_stats(db, range_key)


@router.get("/payments", response_model=PaymentTransactionsResponse)
def list_payments(
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    reference: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = db.query(PaymentTransaction)
    status_value = _coerce_status(status)
    if status_value is not None:
        query = query.filter(PaymentTransaction.status == status_value)
    if user_id:
        query = query.filter(PaymentTransaction.user_id == user_id.strip())
    if reference:
        query = query.filter(PaymentTransaction.paystack_reference == reference.strip())

    total = query.count()
    items = (
        query.order_by(PaymentTransaction.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/coins/{user_id}", response_model=CoinBalanceOut)
def coin_balance(user_id: str, admin=Depends(require_admin), db: Session = Depends(get_db)):
    return {"user_id": user_id, "coin_balance": get_coin_balance(db, user_id)}
