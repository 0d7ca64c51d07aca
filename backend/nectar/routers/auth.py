"""Auth router — sign-up and login."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from nectar.config import settings
from nectar.database import get_db
from nectar.middleware.rate_limit import limiter
from nectar.schemas.auth import SignUpRequest, LoginRequest, SessionResponse, SignUpResponse
from nectar.schemas.user import UserResponse
from nectar.services import auth_service, user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=SignUpResponse, status_code=201)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def signup(request: Request, req: SignUpRequest, db: Session = Depends(get_db)):
    """Register a student, CR or teacher account."""
    user = user_service.sign_up(db, req)
    return SignUpResponse(
        message="User created successfully.",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=SessionResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for an access token."""
    session = auth_service.sign_in(db, req.email, req.password)
    return SessionResponse(
        access_token=session["access_token"],
        token_type=session["token_type"],
        expires_in=session["expires_in"],
        user=UserResponse.model_validate(session["user"]),
    )
