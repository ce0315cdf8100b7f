# movment/services/accounts.py
"""Role management done by admins/owner. The owner account can never be modified."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from movment.core.errors import NotFound, PermissionDenied, StateConflict
from movment.core.rbac import outranks
from movment.db.types import utcnow
from movment.models.enums import ManagerRequestStatus, Role
from movment.models.manager_request import ManagerRequest
from movment.models.user import User

logger = logging.getLogger(__name__)

OWNER_LOCKED = "Cannot change the owner's role"


def _target(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    if user.role == Role.OWNER.value:
        raise PermissionDenied(OWNER_LOCKED)
    return user


def _save(db: Session, user: User, actor: User, what: str) -> User:
    db.commit()
    db.refresh(user)
    logger.info("%s: user %s by %s (role=%s approved=%s)", what, user.id, actor.id, user.role, user.approved)
    return user


def approve_manager(db: Session, actor: User, user_id: int) -> User:
    user = _target(db, user_id)
    if user.role != Role.MANAGER.value:
        raise StateConflict("User is not a manager")
    user.approved = True
    return _save(db, user, actor, "Manager approved")


def promote_admin(db: Session, actor: User, user_id: int) -> User:
    user = _target(db, user_id)
    if user.role != Role.MANAGER.value:
        raise StateConflict("Only managers can be promoted to admin")
    user.role = Role.ADMIN.value
    user.approved = True
    return _save(db, user, actor, "Promoted to admin")


def remove_manager(db: Session, actor: User, user_id: int) -> User:
    user = _target(db, user_id)
    if user.role != Role.MANAGER.value:
        raise StateConflict("User is not a manager")
    user.role = Role.USER.value
    user.approved = False
    return _save(db, user, actor, "Manager removed")


def demote_admin(db: Session, actor: User, user_id: int) -> User:
    """admin -> manager. Takes effect on the target's very next request."""
    user = _target(db, user_id)
    if user.role != Role.ADMIN.value:
        raise StateConflict("User is not an admin")
    if not outranks(actor, user):
        raise PermissionDenied("Only the owner can demote an admin")
    user.role = Role.MANAGER.value
    user.approved = True
    return _save(db, user, actor, "Admin demoted")


def _pending_request(db: Session, request_id: int) -> ManagerRequest:
    req = db.get(ManagerRequest, request_id)
    if req is None:
        raise NotFound("Request not found")
    if req.status != ManagerRequestStatus.PENDING.value:
        raise StateConflict("Request already processed")
    return req


def _close(req: ManagerRequest, actor: User, status: str, now: datetime) -> None:
    req.status = status
    req.processed_by_id = actor.id
    req.processed_at = now


def approve_request(db: Session, actor: User, request_id: int, now: Optional[datetime] = None) -> User:
    req = _pending_request(db, request_id)
    user = db.get(User, req.user_id)
    if user is None:
        raise NotFound("User not found")
    if user.role != Role.USER.value:
        raise StateConflict("User role has changed")
    user.role = Role.MANAGER.value
    user.approved = True
    _close(req, actor, ManagerRequestStatus.APPROVED.value, now or utcnow())
    return _save(db, user, actor, "Manager request approved")


def reject_request(db: Session, actor: User, request_id: int, now: Optional[datetime] = None) -> ManagerRequest:
    req = _pending_request(db, request_id)
    _close(req, actor, ManagerRequestStatus.REJECTED.value, now or utcnow())
    db.commit()
    db.refresh(req)
    return req
