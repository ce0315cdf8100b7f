# movment/schemas/payment.py
from datetime import datetime
from typing import Any, Dict, Optional

from movment.schemas.common import CamelModel
from movment.schemas.user import UserSummary


class PaymentIn(CamelModel):
    event_id: int
    amount: float
    method: str = "other"
    currency: str = "INR"
    extra: Optional[Dict[str, Any]] = None


class PaymentOut(CamelModel):
    id: int
    user_id: int
    event_id: int
    amount: float
    currency: str
    method: str
    status: str
    external_id: Optional[str] = None
    receipt_url: Optional[str] = None
    refunded_amount: float = 0
    created_at: datetime


class RefundIn(CamelModel):
    event_id: int
    user_id: Optional[int] = None
    payment_id: Optional[int] = None
    amount: float
    reason: str = ""


class RefundUpdate(CamelModel):
    status: Optional[str] = None
    admin_note: Optional[str] = None


class RefundOut(CamelModel):
    id: int
    event_id: int
    user_id: int
    payment_id: Optional[int] = None
    amount: float
    reason: str
    status: str
    processed_by_id: Optional[int] = None
    processed_at: Optional[datetime] = None
    admin_note: Optional[str] = None
    user: Optional[UserSummary] = None
    created_at: datetime
