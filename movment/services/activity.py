# movment/services/activity.py
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from movment.models.user_activity import UserActivity


def record_activity(
    db: Session,
    user_id: int,
    action: str,
    *,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    ip: Optional[str] = None,
) -> UserActivity:
    """Adds an activity row to the session; the caller's commit persists it."""
    row = UserActivity(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
        ip=ip,
    )
    db.add(row)
    return row
