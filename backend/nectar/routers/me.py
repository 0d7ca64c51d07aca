"""Current-user router."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.middleware.auth import get_current_user
from nectar.models.user import User
from nectar.schemas.user import UserResponse, ProfilePictureResponse
from nectar.services import file_service
from nectar.services.storage import StorageGateway, get_storage

router = APIRouter(prefix="/api/me", tags=["me"])


@router.get("", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    return current_user


@router.post("/profile-picture", response_model=ProfilePictureResponse)
async def upload_profile_picture(
    profile_picture: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageGateway = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload a new avatar (2 MB max)."""
    data = await profile_picture.read()
    user = file_service.upload_profile_picture(
        db,
        storage,
        current_user.id,
        profile_picture.filename,
        profile_picture.content_type,
        data,
    )
    return ProfilePictureResponse(
        message="Profile picture uploaded successfully.",
        picture_url=user.picture_url,
        user=UserResponse.model_validate(user),
    )
