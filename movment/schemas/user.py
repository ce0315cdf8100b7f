# movment/schemas/user.py
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field

from movment.schemas.common import CamelModel


class Coordinates(CamelModel):
    lat: float
    lng: float


class UserLocationIn(CamelModel):
    city: Optional[str] = None
    area: Optional[str] = None
    address_line: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class RegisterIn(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: str = "user"
    phone: Optional[str] = None
    city: Optional[str] = None


class LoginIn(CamelModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    password: str


class UserSummary(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: str
    approved: bool
    phone: Optional[str] = None
    profile_picture: str = ""
    location: Dict[str, Any] = {}
    preferred_event_types: List[str] = []
    preferred_city: Optional[str] = None
    created_at: Optional[datetime] = None


class TokenOut(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    location: Optional[UserLocationIn] = None
    preferred_event_types: Optional[List[str]] = None
    preferred_city: Optional[str] = None


class ManagerRequestIn(CamelModel):
    message: Optional[str] = None


class ManagerRequestOut(CamelModel):
    id: int
    user_id: int
    status: str
    message: Optional[str] = None
    processed_by_id: Optional[int] = None
    processed_at: Optional[datetime] = None
    created_at: datetime
    user: Optional[UserSummary] = None


class ManagerLocationIn(CamelModel):
    lat: Optional[float] = None
    lng: Optional[float] = None
    city: Optional[str] = None
