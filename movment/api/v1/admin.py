# movment/api/v1/admin.py
"""
Oversight routes. Every handler depends on ``require_admin``, which checks
the role stored in the database on each request.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from movment.core.errors import NotFound, ValidationFailed
from movment.core.rbac import require_admin
from movment.crud.promotion import promotion_crud
from movment.db.session import get_db
from movment.db.types import utcnow
from movment.models.conversation import ManagerConversation
from movment.models.enums import ManagerRequestStatus, NotificationType, PromotionType, RefundStatus, Role, TicketStatus
from movment.models.event import Event
from movment.models.manager_request import ManagerRequest
from movment.models.promotion import Promotion
from movment.models.refund import Refund
from movment.models.support_ticket import SupportTicket, SupportTicketReply
from movment.models.user import User
from movment.models.user_activity import UserActivity
from movment.schemas.conversation import ConversationOut, MessageOut
from movment.schemas.event import EventOut, EventSummary, TeamIn
from movment.schemas.notification import BroadcastIn
from movment.schemas.payment import RefundIn, RefundOut, RefundUpdate
from movment.schemas.promotion import PromotionIn, PromotionOut, PromotionUpdate
from movment.schemas.support import TicketOut, TicketUpdate
from movment.schemas.user import ManagerRequestOut, UserOut, UserSummary
from movment.services import accounts, analytics
from movment.services.lifecycle import get_event
from movment.services.notifications import notify, notify_many

router = APIRouter()

REFUND_DECISIONS = (RefundStatus.APPROVED.value, RefundStatus.PROCESSED.value, RefundStatus.REJECTED.value)
REFUND_FINAL = (RefundStatus.PROCESSED.value, RefundStatus.REJECTED.value)


def _user_result(message: str, user: User) -> dict:
    return {"message": message, "user": UserOut.model_validate(user).model_dump(by_alias=True, mode="json")}

# ---------------------------
# Users / managers
# ---------------------------

@router.get("/users", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return db.scalars(select(User).order_by(User.id)).all()

@router.get("/managers", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_managers(db: Session = Depends(get_db)):
    return db.scalars(select(User).where(User.role == Role.MANAGER.value).order_by(User.id)).all()

@router.get("/pending-managers", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def pending_managers(db: Session = Depends(get_db)):
    return db.scalars(select(User).where(User.role == Role.MANAGER.value, User.approved.is_(False)).order_by(User.id)).all()

@router.post("/managers/{user_id}/approve")
def approve_manager(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return _user_result("Manager approved", accounts.approve_manager(db, admin, user_id))

@router.post("/users/{user_id}/promote-admin")
def promote_admin(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return _user_result("Promoted to admin", accounts.promote_admin(db, admin, user_id))

@router.post("/managers/{user_id}/remove")
def remove_manager(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return _user_result("Manager removed", accounts.remove_manager(db, admin, user_id))

@router.post("/users/{user_id}/demote")
def demote_admin(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return _user_result("Demoted to manager", accounts.demote_admin(db, admin, user_id))

# ---------------------------
# Manager requests
# ---------------------------

@router.get("/manager-requests", response_model=List[ManagerRequestOut], dependencies=[Depends(require_admin)])
def manager_requests(status_: Optional[str] = Query(None, alias="status"), db: Session = Depends(get_db)):
    stmt = select(ManagerRequest).where(ManagerRequest.status == (status_ or ManagerRequestStatus.PENDING.value))
    return db.scalars(stmt.order_by(ManagerRequest.created_at.desc(), ManagerRequest.id.desc())).all()

@router.post("/manager-requests/{request_id}/approve")
def approve_manager_request(request_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return _user_result("Manager request approved", accounts.approve_request(db, admin, request_id))

@router.post("/manager-requests/{request_id}/reject")
def reject_manager_request(request_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    accounts.reject_request(db, admin, request_id)
    return {"message": "Manager request rejected"}

# ---------------------------
# Events / conversations (read-mostly)
# ---------------------------

@router.get("/events", response_model=List[EventSummary], dependencies=[Depends(require_admin)])
def events_summary(db: Session = Depends(get_db)):
    return db.scalars(select(Event).order_by(Event.created_at.desc(), Event.id.desc())).all()

@router.post("/events/{event_id}/assign-team", response_model=EventOut, dependencies=[Depends(require_admin)])
def assign_team(event_id: int, body: TeamIn, db: Session = Depends(get_db)):
    event = get_event(db, event_id)
    event.assigned_team = body.names()
    db.commit(); db.refresh(event)
    return event

@router.get("/conversations", response_model=List[ConversationOut], dependencies=[Depends(require_admin)])
def all_conversations(db: Session = Depends(get_db)):
    return db.scalars(select(ManagerConversation).order_by(ManagerConversation.updated_at.desc())).all()

@router.get("/conversations/{conv_id}/messages", response_model=List[MessageOut], dependencies=[Depends(require_admin)])
def conversation_messages(conv_id: int, db: Session = Depends(get_db)):
    conv = db.get(ManagerConversation, conv_id)
    if conv is None:
        raise NotFound("Not found")
    return conv.messages

# ---------------------------
# Support tickets
# ---------------------------

@router.get("/support-tickets", response_model=List[TicketOut], dependencies=[Depends(require_admin)])
def support_tickets(category: Optional[str] = None, status_: Optional[str] = Query(None, alias="status"), db: Session = Depends(get_db)):
    stmt = select(SupportTicket)
    if category:
        stmt = stmt.where(SupportTicket.category == category)
    if status_:
        stmt = stmt.where(SupportTicket.status == status_)
    return db.scalars(stmt.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())).all()

@router.patch("/support-tickets/{ticket_id}", response_model=TicketOut, dependencies=[Depends(require_admin)])
def update_ticket(ticket_id: int, body: TicketUpdate, db: Session = Depends(get_db)):
    t = db.get(SupportTicket, ticket_id)
    if t is None:
        raise NotFound("Not found")
    if body.status:
        if body.status not in {s.value for s in TicketStatus}:
            raise ValidationFailed("Invalid status")
        t.status = body.status
    if body.reply and body.reply.strip():
        db.add(SupportTicketReply(ticket_id=t.id, sender="support", message=body.reply.strip()))
        notify(db, t.user_id, NotificationType.SUPPORT_REPLY.value, "Support replied", f'New reply on "{t.subject}".')
    t.updated_at = utcnow()
    db.commit(); db.refresh(t)
    return t

# ---------------------------
# Refunds
# ---------------------------

@router.get("/refunds", response_model=List[RefundOut], dependencies=[Depends(require_admin)])
def list_refunds(status_: Optional[str] = Query(None, alias="status"), db: Session = Depends(get_db)):
    stmt = select(Refund)
    if status_:
        stmt = stmt.where(Refund.status == status_)
    return db.scalars(stmt.order_by(Refund.created_at.desc(), Refund.id.desc())).all()

@router.post("/refunds", response_model=RefundOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_refund(body: RefundIn, db: Session = Depends(get_db)):
    event = get_event(db, body.event_id)
    if body.amount < 0:
        raise ValidationFailed("Amount must be positive")
    r = Refund(
        event_id=event.id,
        user_id=body.user_id or event.booked_by_id,
        payment_id=body.payment_id,
        amount=body.amount,
        reason=body.reason or "",
        status=RefundStatus.PENDING.value,
    )
    db.add(r); db.commit(); db.refresh(r)
    return r

@router.patch("/refunds/{refund_id}", response_model=RefundOut)
def update_refund(refund_id: int, body: RefundUpdate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    if body.status not in REFUND_DECISIONS:
        raise ValidationFailed("Invalid status")
    r = db.get(Refund, refund_id)
    if r is None:
        raise NotFound("Not found")
    r.status = body.status
    if body.admin_note:
        r.admin_note = body.admin_note
    if body.status in REFUND_FINAL:
        r.processed_by_id = admin.id
        r.processed_at = utcnow()
    db.commit(); db.refresh(r)
    return r

# ---------------------------
# Activity / analytics
# ---------------------------

@router.get("/user-activity", dependencies=[Depends(require_admin)])
def user_activity(
    user_id: Optional[int] = Query(None, alias="userId"),
    action: Optional[str] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    stmt = select(UserActivity)
    if user_id:
        stmt = stmt.where(UserActivity.user_id == user_id)
    if action:
        stmt = stmt.where(UserActivity.action == action)
    rows = db.scalars(stmt.order_by(UserActivity.created_at.desc(), UserActivity.id.desc()).limit(min(max(limit, 1), 500))).all()
    return [
        {
            "id": a.id,
            "user": UserSummary.model_validate(a.user).model_dump(by_alias=True) if a.user else None,
            "action": a.action,
            "entityType": a.entity_type,
            "entityId": a.entity_id,
            "metadata": a.details,
            "ip": a.ip,
            "createdAt": a.created_at.isoformat(),
        }
        for a in rows
    ]

@router.get("/analytics/dashboard", dependencies=[Depends(require_admin)])
def analytics_dashboard(db: Session = Depends(get_db)):
    return analytics.dashboard(db, utcnow())

@router.get("/analytics/reports", dependencies=[Depends(require_admin)])
def analytics_reports(period: str = "month", db: Session = Depends(get_db)):
    return analytics.report(db, utcnow(), period)

@router.get("/analytics/manager-performance", dependencies=[Depends(require_admin)])
def analytics_manager_performance(db: Session = Depends(get_db)):
    return analytics.manager_performance(db)

@router.get("/analytics/load", dependencies=[Depends(require_admin)])
def analytics_load(db: Session = Depends(get_db)):
    return analytics.load(db, utcnow())

# ---------------------------
# Notifications broadcast
# ---------------------------

@router.post("/notifications/send", dependencies=[Depends(require_admin)])
def send_notifications(body: BroadcastIn, db: Session = Depends(get_db)):
    if not body.title or not body.title.strip():
        raise HTTPException(status_code=400, detail="title required")
    if body.type not in {t.value for t in NotificationType}:
        raise ValidationFailed("Invalid notification type")

    targets: List[int] = []
    if body.broadcast:
        targets.extend(db.scalars(select(User.id).order_by(User.id)).all())
    if body.user_ids:
        targets.extend(db.scalars(select(User.id).where(User.id.in_(body.user_ids))).all())
    if body.manager_ids:
        targets.extend(
            db.scalars(select(User.id).where(User.id.in_(body.manager_ids), User.role == Role.MANAGER.value)).all()
        )
    created = notify_many(db, targets, body.type, body.title.strip(), body.body.strip(), link=body.link)
    db.commit()
    return {"message": f"Sent to {len(created)} user(s)", "count": len(created)}

# ---------------------------
# Promotions
# ---------------------------

@router.get("/promotions", response_model=List[PromotionOut], dependencies=[Depends(require_admin)])
def list_promotions(db: Session = Depends(get_db)):
    return promotion_crud.get_multi(db, limit=500, order_by=Promotion.created_at.desc())

@router.post("/promotions", response_model=PromotionOut, status_code=status.HTTP_201_CREATED)
def create_promotion(body: PromotionIn, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    if not body.code.strip():
        raise ValidationFailed("code, validFrom, validTo required")
    if body.type not in {t.value for t in PromotionType}:
        raise ValidationFailed("Invalid promotion type")
    if promotion_crud.get_by_code(db, body.code):
        raise HTTPException(status_code=400, detail="Code already exists")
    return promotion_crud.create(db, body, extra={"created_by_id": admin.id})

@router.patch("/promotions/{promotion_id}", response_model=PromotionOut, dependencies=[Depends(require_admin)])
def update_promotion(promotion_id: int, body: PromotionUpdate, db: Session = Depends(get_db)):
    return promotion_crud.update(db, promotion_crud.get_or_404(db, promotion_id), body)

@router.delete("/promotions/{promotion_id}", dependencies=[Depends(require_admin)])
def delete_promotion(promotion_id: int, db: Session = Depends(get_db)):
    promotion_crud.delete(db, promotion_crud.get_or_404(db, promotion_id))
    return {"message": "Deleted"}
