"""Bearer-token authentication and role dependencies."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.errors import UnauthorizedError
from nectar.models.user import User
from nectar.services.auth_service import verify_token

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the token's subject to a profile; the role comes from the users table."""
    try:
        claims = verify_token(credentials.credentials)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message)

    user = db.get(User, claims["sub"])
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.role:
        raise HTTPException(
            status_code=403,
            detail="Access denied: User profile incomplete or role not assigned.",
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return current_user


def require_teacher(current_user: User = Depends(get_current_user)) -> User:
    """Teachers, plus admins acting on their behalf."""
    if current_user.role not in ("teacher", "admin"):
        raise HTTPException(status_code=403, detail="Teacher or admin role required")
    return current_user
