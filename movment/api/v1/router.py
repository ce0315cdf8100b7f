# movment/api/v1/router.py
from fastapi import APIRouter
from movment.api.v1 import (
    auth,
    events,
    user,
    manager,
    admin,
)

api_router = APIRouter()

# -------- public + authenticated --------
api_router.include_router(auth.router,    prefix="/auth",    tags=["auth"])
api_router.include_router(events.router,  prefix="/events",  tags=["events"])

# -------- role scoped --------
api_router.include_router(user.router,    prefix="/user",    tags=["user"])
api_router.include_router(manager.router, prefix="/manager", tags=["manager"])
api_router.include_router(admin.router,   prefix="/admin",   tags=["admin"])
