# movment/schemas/resource.py
from datetime import datetime
from typing import Optional

from movment.schemas.common import CamelModel


class ResourceIn(CamelModel):
    name: str
    type: str = "other"
    quantity: int = 1
    unit: str = "pcs"
    available: bool = True


class ResourceUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[str] = None
    quantity: Optional[int] = None
    unit: Optional[str] = None
    available: Optional[bool] = None


class ResourceOut(CamelModel):
    id: int
    manager_id: int
    name: str
    type: str
    quantity: int
    unit: str
    available: bool
    created_at: datetime
