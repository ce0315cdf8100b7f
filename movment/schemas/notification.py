# movment/schemas/notification.py
from datetime import datetime
from typing import List, Optional

from movment.schemas.common import CamelModel


class NotificationOut(CamelModel):
    id: int
    user_id: int
    type: str
    title: str
    body: str = ""
    link: Optional[str] = None
    read: bool
    related_event_id: Optional[int] = None
    created_at: datetime


class BroadcastIn(CamelModel):
    title: Optional[str] = None
    body: str = ""
    type: str = "general"
    link: Optional[str] = None
    broadcast: bool = False
    user_ids: List[int] = []
    manager_ids: List[int] = []
