# movment/services/analytics.py
from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from movment.models.enums import EventStatus, PaymentStatus, Role
from movment.models.event import Event
from movment.models.feedback import Feedback
from movment.models.payment import Payment
from movment.models.user import User

CANCELLED = EventStatus.CANCELLED.value
UPCOMING = (EventStatus.PENDING.value, EventStatus.ACCEPTED.value, EventStatus.IN_PROGRESS.value)


def _r2(value: Optional[float]) -> float:
    return round(float(value or 0), 2)


def period_start(now: datetime, period: str) -> datetime:
    if period == "week":
        return now - timedelta(days=7)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _totals(db: Session, start: datetime) -> Dict[str, Any]:
    revenue = db.scalar(
        select(func.coalesce(func.sum(Payment.amount - func.coalesce(Payment.refunded_amount, 0)), 0)).where(
            Payment.status == PaymentStatus.COMPLETED.value, Payment.created_at >= start
        )
    )
    bookings = db.scalar(select(func.count(Event.id)).where(Event.created_at >= start, Event.status != CANCELLED))
    cancelled = db.scalar(select(func.count(Event.id)).where(Event.created_at >= start, Event.status == CANCELLED))
    avg_rating, fb_count = db.execute(
        select(func.avg(Feedback.rating), func.count(Feedback.id)).where(Feedback.created_at >= start)
    ).one()
    return {
        "revenue": _r2(revenue),
        "bookings": bookings or 0,
        "cancelled": cancelled or 0,
        "avgRating": _r2(avg_rating),
        "feedbackCount": fb_count or 0,
    }


def dashboard(db: Session, now: datetime) -> Dict[str, Any]:
    t = _totals(db, period_start(now, "month"))
    by_status = dict(db.execute(select(Event.status, func.count(Event.id)).group_by(Event.status)).all())
    by_type = dict(
        db.execute(select(Event.type, func.count(Event.id)).where(Event.status != CANCELLED).group_by(Event.type)).all()
    )
    dates = Counter(
        d.date().isoformat() for d in db.scalars(select(Event.scheduled_at).where(Event.status != CANCELLED))
    )
    high_demand = [{"date": d, "count": c} for d, c in sorted(dates.items(), key=lambda kv: (-kv[1], kv[0]))[:10]]
    return {
        "revenue": t["revenue"],
        "bookingsCount": t["bookings"],
        "cancelledCount": t["cancelled"],
        "avgRating": t["avgRating"],
        "feedbackCount": t["feedbackCount"],
        "byStatus": by_status,
        "byType": by_type,
        "highDemandDates": high_demand,
        "period": "month",
    }


def report(db: Session, now: datetime, period: str = "month") -> Dict[str, Any]:
    period = "week" if period == "week" else "month"
    start = period_start(now, period)
    return {"period": period, "start": start.isoformat(), "end": now.isoformat(), **_totals(db, start)}


def manager_performance(db: Session) -> List[Dict[str, Any]]:
    managers = db.scalars(select(User).where(User.role == Role.MANAGER.value).order_by(User.id)).all()
    completed_expr = func.sum(case((Event.status == EventStatus.COMPLETED.value, 1), else_=0))
    events = {
        mid: (total, completed or 0)
        for mid, total, completed in db.execute(
            select(Event.assigned_manager_id, func.count(Event.id), completed_expr)
            .where(Event.assigned_manager_id.is_not(None))
            .group_by(Event.assigned_manager_id)
        ).all()
    }
    ratings = {
        mid: (avg, n)
        for mid, avg, n in db.execute(
            select(Feedback.manager_id, func.avg(Feedback.rating), func.count(Feedback.id)).group_by(Feedback.manager_id)
        ).all()
    }
    out = []
    for m in managers:
        total, completed = events.get(m.id, (0, 0))
        avg, n = ratings.get(m.id, (0, 0))
        out.append(
            {
                "id": m.id,
                "name": m.name,
                "email": m.email,
                "totalEvents": total,
                "completedEvents": completed,
                "completionRate": round(completed / total * 100) if total else 0,
                "avgRating": _r2(avg),
                "feedbackCount": n,
            }
        )
    return out


def manager_summary(db: Session, manager_id: int) -> Dict[str, Any]:
    by_status = {s.value: 0 for s in EventStatus}
    for status, n in db.execute(
        select(Event.status, func.count(Event.id)).where(Event.assigned_manager_id == manager_id).group_by(Event.status)
    ).all():
        by_status[status] = n
    total = sum(by_status.values())
    completed = by_status[EventStatus.COMPLETED.value]
    return {
        "total": total,
        "completed": completed,
        "completionRate": round(completed / total * 100) if total else 0,
        "byStatus": by_status,
    }


def load(db: Session, now: datetime) -> Dict[str, Any]:
    upcoming = db.scalars(
        select(Event).where(Event.status.in_(UPCOMING), Event.scheduled_at >= now).order_by(Event.scheduled_at)
    ).all()
    buckets: Dict[Any, Dict[str, Any]] = defaultdict(lambda: {"manager": None, "count": 0, "events": []})
    for ev in upcoming:
        key = ev.assigned_manager_id or "unassigned"
        b = buckets[key]
        if b["manager"] is None:
            m = ev.assigned_manager
            b["manager"] = {"id": m.id, "name": m.name, "email": m.email} if m else {"name": "Unassigned"}
        b["count"] += 1
        b["events"].append({"id": ev.id, "title": ev.title, "scheduledAt": ev.scheduled_at.isoformat()})
    pending = db.scalar(select(func.count(Event.id)).where(Event.status == EventStatus.PENDING.value))
    return {"byManager": list(buckets.values()), "pendingCount": pending or 0, "totalUpcoming": len(upcoming)}


def ratings_by_manager(db: Session, limit: int = 50) -> List[Dict[str, Any]]:
    avg = func.avg(Feedback.rating)
    rows = db.execute(
        select(Feedback.manager_id, avg, func.count(Feedback.id))
        .group_by(Feedback.manager_id)
        .order_by(avg.desc())
        .limit(limit)
    ).all()
    return [{"managerId": mid, "avgRating": _r2(a), "count": n} for mid, a, n in rows]
