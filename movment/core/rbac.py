# movment/core/rbac.py
from fastapi import Depends, HTTPException, status

from movment.api.deps import get_current_user
from movment.models.enums import Role
from movment.models.user import User

ROLE_USER = Role.USER.value
ROLE_MANAGER = Role.MANAGER.value
ROLE_ADMIN = Role.ADMIN.value
ROLE_OWNER = Role.OWNER.value

_HIERARCHY = [ROLE_USER, ROLE_MANAGER, ROLE_ADMIN, ROLE_OWNER]
_RANK = {name: idx for idx, name in enumerate(_HIERARCHY)}

def require_roles(*roles: str):
    """Dependency: the stored role (never the token claim) must be one of ``roles``."""
    allowed = set(roles)
    def dep(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user
    return dep

def outranks(actor: User, target: User) -> bool:
    return _RANK.get(actor.role, -1) > _RANK.get(target.role, -1)

require_staff = require_roles(ROLE_MANAGER, ROLE_ADMIN, ROLE_OWNER)
require_admin = require_roles(ROLE_ADMIN, ROLE_OWNER)
require_booker = require_roles(ROLE_USER, ROLE_ADMIN, ROLE_OWNER)
