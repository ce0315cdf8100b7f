# movment/schemas/conversation.py
from datetime import datetime
from typing import List, Optional

from movment.schemas.common import CamelModel
from movment.schemas.user import UserSummary


class ConversationIn(CamelModel):
    event_id: int
    text: Optional[str] = None


class MessageIn(CamelModel):
    text: Optional[str] = None


class MessageOut(CamelModel):
    sender: str
    text: str
    at: datetime


class ConversationOut(CamelModel):
    id: int
    event_id: int
    user_id: int
    manager_id: int
    user: Optional[UserSummary] = None
    manager: Optional[UserSummary] = None
    messages: List[MessageOut] = []
    created_at: datetime
    updated_at: datetime
