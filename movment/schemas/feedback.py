# movment/schemas/feedback.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from movment.schemas.common import CamelModel
from movment.schemas.user import UserSummary


class FeedbackIn(CamelModel):
    rating: Optional[int] = None
    comment: Optional[str] = None
    service_rating: Optional[int] = None


class FeedbackReplyIn(CamelModel):
    reply: Optional[str] = None


class FeedbackOut(CamelModel):
    id: int
    event_id: int
    user_id: int
    manager_id: int
    rating: int
    comment: Optional[str] = None
    service_rating: Optional[int] = None
    manager_reply: Optional[str] = None
    manager_replied_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    created_at: datetime


class SurveyIn(CamelModel):
    answers: List[Dict[str, Any]] = []


class SurveyOut(CamelModel):
    id: int
    event_id: int
    user_id: int
    answers: List[Dict[str, Any]]
    created_at: datetime
