# movment/services/feedback.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from movment.core.errors import PermissionDenied, StateConflict, ValidationFailed
from movment.db.types import utcnow
from movment.models.enums import ActivityAction, EventStatus
from movment.models.feedback import Feedback
from movment.models.survey import Survey
from movment.models.user import User
from movment.services.activity import record_activity
from movment.services.lifecycle import get_event

SURVEY_QUESTIONS = [
    {"id": "overall", "question": "How would you rate your overall experience?", "type": "rating", "min": 1, "max": 5},
    {"id": "would_recommend", "question": "Would you recommend us to a friend?", "type": "rating", "min": 1, "max": 5},
    {"id": "improvement", "question": "What could we improve? (optional)", "type": "text"},
]


def submit_feedback(
    db: Session,
    user: User,
    event_id: int,
    rating: Optional[int],
    comment: Optional[str] = None,
    service_rating: Optional[int] = None,
) -> Feedback:
    if rating is None or not 1 <= rating <= 5:
        raise ValidationFailed("Rating 1-5 required")
    event = get_event(db, event_id)
    if event.booked_by_id != user.id:
        raise PermissionDenied("Forbidden")
    if event.status != EventStatus.COMPLETED.value:
        raise StateConflict("Feedback only for completed events")
    if event.assigned_manager_id is None:
        raise StateConflict("No manager assigned")
    if db.scalar(select(Feedback.id).where(Feedback.event_id == event.id, Feedback.user_id == user.id)):
        raise StateConflict("You already submitted feedback for this event")

    fb = Feedback(
        event_id=event.id,
        user_id=user.id,
        manager_id=event.assigned_manager_id,
        rating=rating,
        comment=comment.strip() if comment else None,
        service_rating=service_rating if service_rating and 1 <= service_rating <= 5 else None,
    )
    db.add(fb)
    db.flush()
    record_activity(db, user.id, ActivityAction.FEEDBACK.value, entity_type="Feedback", entity_id=fb.id)
    db.commit()
    db.refresh(fb)
    return fb


def reply_to_feedback(db: Session, feedback: Feedback, reply: Optional[str], now: Optional[datetime] = None) -> Feedback:
    feedback.manager_reply = reply.strip() if reply else ""
    feedback.manager_replied_at = now or utcnow()
    db.commit()
    db.refresh(feedback)
    return feedback


def submit_survey(db: Session, user: User, event_id: int, answers: List[Dict[str, Any]]) -> Survey:
    event = get_event(db, event_id)
    if event.booked_by_id != user.id:
        raise PermissionDenied("Forbidden")
    if event.status != EventStatus.COMPLETED.value:
        raise StateConflict("Survey only for completed events")
    if db.scalar(select(Survey.id).where(Survey.event_id == event.id, Survey.user_id == user.id)):
        raise StateConflict("You already submitted the survey for this event")
    if not answers:
        raise ValidationFailed("Answers required")

    survey = Survey(
        event_id=event.id,
        user_id=user.id,
        answers=[{"questionId": a.get("questionId"), "question": a.get("question"), "value": a.get("value")} for a in answers],
    )
    db.add(survey)
    db.commit()
    db.refresh(survey)
    return survey
