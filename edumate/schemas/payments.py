from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from edumate.models.payment_transaction import PaymentStatus


class InitializePaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # All optional so a missing field reaches the handler as a 400, not a 422.
    amount: Optional[int] = None
    email: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    package_id: Optional[str] = Field(default=None, alias="packageId")
    coin_amount: Optional[int] = Field(default=None, alias="coinAmount")
    metadata: Optional[dict[str, Any]] = None


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reference: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class PaymentTransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    reference: str
    paystack_reference: Optional[str] = None
    user_id: str
    amount: Decimal
    coin_amount: int
    package_id: str
    status: PaymentStatus
    completed_at: Optional[datetime] = None


class PaymentTransactionsResponse(BaseModel):
    items: list[PaymentTransactionOut]
    total: int
    page: int
    page_size: int
