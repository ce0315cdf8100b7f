from typing import List, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import ForeignKey, JSON, UniqueConstraint
from movment.db.base import Base
from movment.db.types import UTCDateTime, utcnow


class Survey(Base):
    __tablename__ = "surveys"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_surveys_event_user"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    answers: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
