# movment/crud/user.py
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
from movment.crud.base import CRUDBase
from movment.models.user import User
from movment.schemas.user import RegisterIn, ProfileUpdate
from movment.core.security import hash_password

class CRUDUser(CRUDBase[User, RegisterIn, ProfileUpdate]):
    def create(self, db: Session, obj_in: RegisterIn, extra: Dict[str, Any] | None=None) -> User:
        data = obj_in.model_dump()
        data["email"] = data["email"].strip().lower()
        data["password_hash"] = hash_password(data.pop("password"))
        if data.get("city"):
            data["city"] = data["city"].strip()
        if extra: data.update(extra)
        user = User(**data)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.scalar(select(User).where(User.email == email.strip().lower()))

    def get_by_phone(self, db: Session, phone: str) -> Optional[User]:
        return db.scalar(select(User).where(User.phone == phone.strip()).order_by(User.id).limit(1))

    def apply_profile(self, db: Session, user: User, obj_in: ProfileUpdate) -> User:
        data = obj_in.model_dump(exclude_unset=True)
        loc = data.pop("location", None)
        if loc is not None:
            for key in ("city", "area", "address_line"):
                if key in loc:
                    setattr(user, key, loc[key])
            coords = loc.get("coordinates")
            if coords:
                user.lat, user.lng = coords["lat"], coords["lng"]
        return self.update(db, user, data)

user_crud = CRUDUser(User)
