# movment/api/v1/user.py
"""Self-service routes for any signed-in account (customers mostly)."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from movment.api.deps import get_current_user
from movment.core.errors import NotFound, PermissionDenied
from movment.crud.user import user_crud
from movment.db.session import get_db
from movment.db.types import utcnow
from movment.models.conversation import ManagerConversation
from movment.models.enums import ActivityAction, ManagerRequestStatus, PaymentStatus, Role, TicketCategory
from movment.models.event import Event
from movment.models.manager_request import ManagerRequest
from movment.models.notification import Notification
from movment.models.payment import Payment
from movment.models.support_ticket import SupportTicket, SupportTicketReply
from movment.models.user import User
from movment.schemas.conversation import ConversationOut, MessageIn, MessageOut
from movment.schemas.feedback import FeedbackIn, FeedbackOut, SurveyIn, SurveyOut
from movment.schemas.notification import NotificationOut
from movment.schemas.payment import PaymentIn, PaymentOut
from movment.schemas.support import ReplyIn, TicketIn, TicketOut
from movment.schemas.user import ManagerRequestIn, ManagerRequestOut, ProfileUpdate, UserOut
from movment.services import conversations, feedback, invoice
from movment.services.activity import record_activity
from movment.services.lifecycle import get_event

router = APIRouter()

FAQ = [
    {"q": "How do I book an event?", "a": "Log in, go to Create event booking, fill in type, date, venue, and optional services. Submit to create a booking."},
    {"q": "Can I cancel or reschedule?", "a": "Yes. From My events you can cancel or reschedule events that are still pending or accepted."},
    {"q": "How do I get a receipt?", "a": "Open the event in your booking history and use the Download invoice option."},
    {"q": "What payment methods are accepted?", "a": "We accept card, UPI, wallets, and net banking. Split payment can be arranged for group events."},
    {"q": "How do I contact support?", "a": "Use the Support section to raise a query or complaint. We respond within 24 hours."},
]

# ---------------------------
# Manager role request
# ---------------------------

@router.post("/request-manager", status_code=status.HTTP_201_CREATED)
def request_manager(body: Optional[ManagerRequestIn] = None, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if user.role != Role.USER.value:
        raise HTTPException(status_code=400, detail="You already have a manager or higher role")
    pending = db.scalar(
        select(ManagerRequest.id).where(ManagerRequest.user_id == user.id, ManagerRequest.status == ManagerRequestStatus.PENDING.value)
    )
    if pending:
        raise HTTPException(status_code=400, detail="You already have a pending manager request")
    req = ManagerRequest(user_id=user.id, message=body.message if body else None)
    db.add(req); db.commit(); db.refresh(req)
    return {"message": "Request sent. Admin will review it.", "request": {"id": req.id, "status": req.status}}

@router.get("/manager-request", response_model=Optional[ManagerRequestOut])
def my_manager_request(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.scalar(
        select(ManagerRequest).where(ManagerRequest.user_id == user.id).order_by(ManagerRequest.created_at.desc(), ManagerRequest.id.desc()).limit(1)
    )

# ---------------------------
# Profile
# ---------------------------

@router.get("/profile", response_model=UserOut)
def get_profile(user: User = Depends(get_current_user)):
    return user

@router.patch("/profile", response_model=UserOut)
def update_profile(body: ProfileUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if body.name is not None and not body.name.strip():
        body = body.model_copy(update={"name": user.name})
    updated = user_crud.apply_profile(db, user, body)
    record_activity(db, user.id, ActivityAction.PROFILE_UPDATE.value, entity_type="User", entity_id=user.id)
    db.commit()
    return updated

# ---------------------------
# Notifications
# ---------------------------

@router.get("/notifications", response_model=List[NotificationOut])
def list_notifications(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    stmt = select(Notification).where(Notification.user_id == user.id).order_by(Notification.created_at.desc(), Notification.id.desc()).limit(50)
    return db.scalars(stmt).all()

@router.patch("/notifications/read-all")
def mark_all_read(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db.execute(update(Notification).where(Notification.user_id == user.id, Notification.read.is_(False)).values(read=True))
    db.commit()
    return {"message": "All marked as read"}

@router.patch("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_read(notification_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    n = db.get(Notification, notification_id)
    if n is None or n.user_id != user.id:
        raise NotFound("Not found")
    n.read = True
    db.commit(); db.refresh(n)
    return n

# ---------------------------
# Support tickets
# ---------------------------

def _own_ticket(db: Session, ticket_id: int, user: User) -> SupportTicket:
    t = db.get(SupportTicket, ticket_id)
    if t is None or t.user_id != user.id:
        raise NotFound("Not found")
    return t

@router.post("/support", response_model=TicketOut, status_code=status.HTTP_201_CREATED)
def create_ticket(body: TicketIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not body.subject or not body.message:
        raise HTTPException(status_code=400, detail="Subject and message required")
    category = body.category if body.category in {c.value for c in TicketCategory} else TicketCategory.QUERY.value
    t = SupportTicket(user_id=user.id, subject=body.subject.strip(), message=body.message, category=category, related_event_id=body.related_event_id)
    db.add(t); db.flush()
    record_activity(db, user.id, ActivityAction.SUPPORT_TICKET.value, entity_type="SupportTicket", entity_id=t.id)
    db.commit(); db.refresh(t)
    return t

@router.get("/support", response_model=List[TicketOut])
def list_tickets(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.scalars(select(SupportTicket).where(SupportTicket.user_id == user.id).order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())).all()

@router.get("/support/{ticket_id}", response_model=TicketOut)
def get_ticket(ticket_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _own_ticket(db, ticket_id, user)

@router.post("/support/{ticket_id}/reply", response_model=TicketOut)
def reply_ticket(ticket_id: int, body: ReplyIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not body.message or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message required")
    t = _own_ticket(db, ticket_id, user)
    db.add(SupportTicketReply(ticket_id=t.id, sender="user", message=body.message.strip()))
    t.updated_at = utcnow()
    db.commit(); db.refresh(t)
    return t

# ---------------------------
# Payments (stub gateway) + invoice
# ---------------------------

@router.post("/payments", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
def create_payment(body: PaymentIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if body.amount < 0:
        raise HTTPException(status_code=400, detail="Event and amount required")
    event = db.get(Event, body.event_id)
    if event is None or event.booked_by_id != user.id:
        raise NotFound("Event not found")
    now = utcnow()
    p = Payment(
        user_id=user.id,
        event_id=event.id,
        amount=body.amount,
        currency=body.currency,
        method=body.method or "other",
        status=PaymentStatus.COMPLETED.value,
        external_id=f"stub_{int(now.timestamp() * 1000)}",
        receipt_url=f"/api/v1/user/invoice/{event.id}?format=receipt",
        extra=body.extra,
        created_at=now,
    )
    db.add(p); db.flush()
    record_activity(db, user.id, ActivityAction.PAYMENT.value, entity_type="Payment", entity_id=p.id, details={"amount": body.amount})
    db.commit(); db.refresh(p)
    return p

@router.get("/payments", response_model=List[PaymentOut])
def list_payments(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.scalars(select(Payment).where(Payment.user_id == user.id).order_by(Payment.created_at.desc(), Payment.id.desc())).all()

@router.get("/invoice/{event_id}")
def get_invoice(event_id: int, format: str = Query("json"), db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    event = get_event(db, event_id)
    if event.booked_by_id != user.id:
        raise PermissionDenied("Forbidden")
    if format == "pdf":
        pdf = invoice.render_invoice_pdf(event)
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="invoice-{event.id}.pdf"'},
        )
    payments = db.scalars(select(Payment).where(Payment.event_id == event.id, Payment.user_id == user.id)).all()
    return invoice.build_invoice(event, payments)

# ---------------------------
# Feedback / survey
# ---------------------------

@router.post("/events/{event_id}/feedback", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def post_feedback(event_id: int, body: FeedbackIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return feedback.submit_feedback(db, user, event_id, body.rating, body.comment, body.service_rating)

@router.get("/survey/questions")
def survey_questions(_: User = Depends(get_current_user)):
    return feedback.SURVEY_QUESTIONS

@router.post("/events/{event_id}/survey", response_model=SurveyOut, status_code=status.HTTP_201_CREATED)
def post_survey(event_id: int, body: SurveyIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return feedback.submit_survey(db, user, event_id, body.answers)

# ---------------------------
# Conversations with the assigned manager
# ---------------------------

@router.get("/conversations", response_model=List[ConversationOut])
def list_conversations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    stmt = select(ManagerConversation).where(ManagerConversation.user_id == user.id).order_by(ManagerConversation.updated_at.desc())
    return db.scalars(stmt).all()

@router.get("/conversations/for-event/{event_id}", response_model=ConversationOut)
def conversation_for_event(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    event = get_event(db, event_id)
    if event.booked_by_id != user.id:
        raise PermissionDenied("Forbidden")
    conv = conversations.open_for_event(db, event)
    if conv is None:
        raise NotFound("No conversation for this event yet. A manager will start the chat once assigned.")
    return conv

@router.get("/conversations/{conv_id}/messages", response_model=List[MessageOut])
def conversation_messages(conv_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return conversations.get_for_participant(db, conv_id, user, "user").messages

@router.post("/conversations/{conv_id}/messages", response_model=List[MessageOut])
def send_message(conv_id: int, body: MessageIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    conv = conversations.get_for_participant(db, conv_id, user, "user")
    conv = conversations.post_message(db, conv, "user", body.text)
    record_activity(db, user.id, ActivityAction.CHAT_MESSAGE.value, entity_type="ManagerConversation", entity_id=conv.id)
    db.commit()
    return conv.messages

@router.get("/faq")
def faq():
    return FAQ
