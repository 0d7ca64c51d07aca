"""Auth service — password identities and Supabase-compatible access tokens."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from nectar.config import settings
from nectar.database import persist, UniqueViolation
from nectar.errors import ConflictError, UnauthorizedError, InternalError
from nectar.models.user import AuthIdentity, User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt directly (passlib is broken with bcrypt>=4.1)."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(identity: AuthIdentity) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": identity.id,
        "email": identity.email,
        "aud": settings.JWT_AUDIENCE,
        "role": "authenticated",
        "exp": expire,
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    """Decode and validate an access token, returning its claims."""
    try:
        claims = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError:
        raise UnauthorizedError("Invalid or expired token")
    if not claims.get("sub"):
        raise UnauthorizedError("Invalid token payload")
    return claims


def register_user(db: Session, email: str, password: str, profile: dict) -> User:
    """Create the auth identity and its profile row in one transaction.

    ``profile`` holds the users-table columns other than id and email.
    """
    identity = AuthIdentity(
        id=str(uuid.uuid4()), email=email, password_hash=hash_password(password)
    )
    db.add(identity)

    user = User(id=identity.id, email=email, **profile)
    db.add(user)
    try:
        persist(db, user)
    except UniqueViolation as exc:
        if exc.constraint == "users_student_id_key":
            raise ConflictError("User with this Student ID already exists.") from exc
        raise ConflictError("User with this email already exists.") from exc

    logger.info("Registered user %s with role %s", user.id, user.role)
    return user


def sign_in(db: Session, email: str, password: str) -> dict:
    """Check credentials and issue an access token for the profile."""
    identity = db.query(AuthIdentity).filter(AuthIdentity.email == email).first()
    if not identity or not verify_password(password, identity.password_hash):
        raise UnauthorizedError("Invalid email or password.")

    user = db.get(User, identity.id)
    if user is None:
        raise InternalError("Signed in but user profile data may be missing.")

    return {
        "access_token": create_access_token(identity),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "user": user,
    }


def delete_identity(db: Session, user_id: str) -> Optional[AuthIdentity]:
    """Stage removal of the login identity for a user, if one exists."""
    identity = db.get(AuthIdentity, user_id)
    if identity is not None:
        db.delete(identity)
    return identity
