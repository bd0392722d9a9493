from datetime import datetime

from pydantic import BaseModel


class RevenuePoint(BaseModel):
    month: str
    amount: float


class DashboardStats(BaseModel):
    range: str
    start: datetime
    end: datetime
    total_users: int
    total_students: int
    total_teachers: int
    premium_users: int
    new_users: int
    curriculum_items: int
    total_quizzes: int
    total_textbooks: int
    total_past_questions: int
    completed_payments: int
    revenue: float
    coins_sold: int
    revenue_by_month: list[RevenuePoint]


class CoinBalanceOut(BaseModel):
    user_id: str
    coin_balance: int
