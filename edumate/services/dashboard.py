from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from edumate.models import (
    Curriculum,
    PastQuestionPaper,
    PaymentStatus,
    PaymentTransaction,
    Quiz,
    Textbook,
    User,
    UserRole,
)


RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365, "all": None}
ALL_TIME_START = datetime(2020, 1, 1, tzinfo=timezone.utc)


def resolve_range(range_key: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    if range_key not in RANGE_DAYS:
        raise HTTPException(status_code=400, detail="Invalid range")
    end = now or datetime.now(timezone.utc)
    days = RANGE_DAYS[range_key]
    start = end - timedelta(days=days) if days else ALL_TIME_START
    return start, end


def _month_key(value) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m")
    return str(value)[:7]


def dashboard_stats(db: Session, range_key: str = "30d", now: datetime | None = None) -> dict:
    start, end = resolve_range(range_key, now)

    def count(model, *criteria) -> int:
        return int(db.query(func.count(model.id)).filter(*criteria).scalar() or 0)

    completed = (
        PaymentTransaction.status == PaymentStatus.COMPLETED,
        PaymentTransaction.completed_at >= start,
        PaymentTransaction.completed_at <= end,
    )
    revenue = db.query(func.sum(PaymentTransaction.amount)).filter(*completed).scalar() or 0
    coins_sold = db.query(func.sum(PaymentTransaction.coin_amount)).filter(*completed).scalar() or 0

    # Group in Python: month truncation differs between PostgreSQL and SQLite.
    revenue_by_month: dict[str, float] = {}
    rows = db.query(PaymentTransaction.completed_at, PaymentTransaction.amount).filter(*completed).all()
    for completed_at, amount in rows:
        key = _month_key(completed_at)
        revenue_by_month[key] = revenue_by_month.get(key, 0.0) + float(amount or 0)

    return {
        "range": range_key,
        "start": start,
        "end": end,
        "total_users": count(User),
        "total_students": count(User, User.role == UserRole.STUDENT),
        "total_teachers": count(User, User.role == UserRole.TEACHER),
        "premium_users": count(User, User.is_premium.is_(True)),
        "new_users": count(User, User.created_at >= start, User.created_at <= end),
        "curriculum_items": count(Curriculum),
        "total_quizzes": count(Quiz),
        "total_textbooks": count(Textbook),
        "total_past_questions": count(PastQuestionPaper),
        "completed_payments": count(PaymentTransaction, *completed),
        "revenue": float(revenue),
        "coins_sold": int(coins_sold),
        "revenue_by_month": [
            {"month": month, "amount": round(amount, 2)} for month, amount in sorted(revenue_by_month.items())
        ],
    }
