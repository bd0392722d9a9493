import enum
from sqlalchemy import Column, Integer, String, Numeric, Enum, Index, DateTime, JSON
from edumate.core.database import Base
from edumate.models.base import TimestampMixin, enum_values


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentTransaction(Base, TimestampMixin):
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, index=True)
    reference = Column(String(128), unique=True, nullable=False, index=True)
    paystack_reference = Column(String(128), nullable=True, index=True)
    user_id = Column(String(64), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    coin_amount = Column(Integer, nullable=False)
    package_id = Column(String(64), nullable=False)
    status = Column(Enum(PaymentStatus, values_callable=enum_values), nullable=False, default=PaymentStatus.PENDING)
    paystack_data = Column(JSON, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)


Index("ix_payment_transactions_user_status", PaymentTransaction.user_id, PaymentTransaction.status)
Index("ix_payment_transactions_paystack_ref_user", PaymentTransaction.paystack_reference, PaymentTransaction.user_id)
