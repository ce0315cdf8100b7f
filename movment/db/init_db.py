# movment/db/init_db.py
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from movment.core.config import settings
from movment.core.security import hash_password
from movment.models.enums import Role
from movment.models.user import User

logger = logging.getLogger(__name__)


def init_db(db: Session) -> None:
    """Ensure exactly one owner account exists. Idempotent."""
    if db.scalar(select(User).where(User.role == Role.OWNER.value)):
        return

    email = settings.OWNER_EMAIL.strip().lower()
    owner = db.scalar(select(User).where(User.email == email))
    if owner:
        owner.role = Role.OWNER.value
        owner.approved = True
    else:
        owner = User(
            name="Owner",
            email=email,
            password_hash=hash_password(settings.OWNER_PASSWORD),
            role=Role.OWNER.value,
            approved=True,
        )
        db.add(owner)
    db.commit()
    logger.info("Owner account ready: %s", email)
