from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.models.role import RoleName, STAFF_ROLES
from app.utils.security import verify_access_token
from app.utils.exceptions import UnauthorizedException, ForbiddenException

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


# ─── Get Current User ─────────────────────────────────────────────────────────
def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate JWT Bearer token and return the current User.
    Raises 401 if token is missing, invalid, expired, or the user is gone.
    """
    if not credentials:
        raise UnauthorizedException()

    payload = verify_access_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise UnauthorizedException()

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise UnauthorizedException()

    return user


# ─── Role Guards ──────────────────────────────────────────────────────────────
def require_roles(*roles: RoleName):
    """
    Factory that returns a FastAPI dependency requiring one of the given roles.

    Usage:
        @router.get("/owner-only")
        def owner_route(current_user = Depends(require_roles(RoleName.OWNER))):
            ...
    """
    allowed = {r.value for r in roles}

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenException(
                f"This action requires one of these roles: {sorted(allowed)}"
            )
        return current_user
    return dependency


# ─── Pre-built role dependencies ─────────────────────────────────────────────
def get_owner_user(current_user: User = Depends(require_roles(RoleName.OWNER))) -> User:
    return current_user

def get_staff_user(current_user: User = Depends(require_roles(*STAFF_ROLES))) -> User:
    """Owner or partner: may manage the catalog."""
    return current_user
