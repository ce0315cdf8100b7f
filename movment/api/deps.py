# movment/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from movment.core.tokens import decode_access
from movment.db.session import get_db
from movment.models.enums import Role
from movment.models.user import User

PENDING_APPROVAL = "Your manager account is pending approval. Please contact the admin."

# ----------------------------------------------------------------------
# Bearer from the Authorization header (no OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization token missing")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1]

# ----------------------------------------------------------------------
# Current user, always re-read from the database: the token only names the
# account, role and approval come from the row.
# ----------------------------------------------------------------------
def get_current_user(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)) -> User:
    payload = decode_access(token)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if user.role == Role.MANAGER.value and not user.approved:
        raise HTTPException(status_code=403, detail=PENDING_APPROVAL)
    return user
