# movment/schemas/promotion.py
from datetime import datetime
from typing import Optional

from movment.schemas.common import CamelModel


class PromotionIn(CamelModel):
    code: str
    type: str = "percent"
    value: float
    min_order_amount: float = 0
    valid_from: datetime
    valid_to: datetime
    event_type: Optional[str] = None
    max_uses: Optional[int] = None
    active: bool = True


class PromotionUpdate(CamelModel):
    type: Optional[str] = None
    value: Optional[float] = None
    min_order_amount: Optional[float] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    event_type: Optional[str] = None
    max_uses: Optional[int] = None
    active: Optional[bool] = None


class PromotionOut(CamelModel):
    id: int
    code: str
    type: str
    value: float
    min_order_amount: float
    valid_from: datetime
    valid_to: datetime
    event_type: Optional[str] = None
    max_uses: Optional[int] = None
    used_count: int
    active: bool
    created_at: datetime
