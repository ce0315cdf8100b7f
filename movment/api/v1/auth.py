# movment/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from movment.api.deps import get_current_user, PENDING_APPROVAL
from movment.core.security import verify_and_maybe_upgrade
from movment.core.tokens import create_access_token
from movment.crud.user import user_crud
from movment.db.session import get_db
from movment.models.enums import ActivityAction, Role
from movment.models.user import User
from movment.schemas.user import LoginIn, RegisterIn, TokenOut, UserOut
from movment.services.activity import record_activity

logger = logging.getLogger(__name__)
router = APIRouter()

SELF_SERVICE_ROLES = (Role.USER.value, Role.MANAGER.value)

# ---------- helpers ----------
def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

def _client_ip(request: Request) -> str | None:
    fwd = request.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip()
    return request.client.host if request.client else None

# ---------- routes ----------
@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(body: RegisterIn, db: Session = Depends(get_db)):
    role = (body.role or "user").strip().lower()
    if role not in SELF_SERVICE_ROLES:
        raise HTTPException(status_code=400, detail="Role must be user or manager")
    if user_crud.get_by_email(db, body.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    phone = body.phone.strip() if body.phone and body.phone.strip() else None
    user = user_crud.create(
        db,
        body.model_copy(update={"role": role, "phone": phone}),
        extra={"approved": role != Role.MANAGER.value},
    )
    logger.info("Registered user %s (%s)", user.id, user.role)
    return user

@router.post("/login", response_model=TokenOut)
def login(body: LoginIn, request: Request, db: Session = Depends(get_db)):
    if not body.email and not body.phone:
        raise HTTPException(status_code=400, detail="Email or phone required")
    user = user_crud.get_by_email(db, normalize_email(body.email)) if body.email else user_crud.get_by_phone(db, body.phone)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    ok, new_hash = verify_and_maybe_upgrade(body.password, user.password_hash)
    if not ok:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if user.role == Role.MANAGER.value and not user.approved:
        raise HTTPException(status_code=403, detail=PENDING_APPROVAL)

    if new_hash:
        user.password_hash = new_hash
    record_activity(db, user.id, ActivityAction.LOGIN.value, ip=_client_ip(request))
    db.commit()

    token = create_access_token(user_id=user.id, role=user.role)
    return TokenOut(token=token, user=UserOut.model_validate(user))

@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
