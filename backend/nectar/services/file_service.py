"""File service — profile pictures and class routine PDFs."""

import logging
import os
import re
import time
from typing import Optional

from sqlalchemy.orm import Session

from nectar.config import settings
from nectar.database import persist, BackendError, ForeignKeyViolation, UniqueViolation
from nectar.errors import BadRequestError, ConflictError, NotFoundError
from nectar.models.class_event import ClassRoutine
from nectar.models.user import User
from nectar.services.authorization import authorize_class_moderator
from nectar.services.storage import StorageGateway
from nectar.services.user_service import get_user

logger = logging.getLogger(__name__)

_IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_SAFE_EXTENSION = re.compile(r"\.[a-z0-9]{1,5}")


def _millis() -> int:
    return int(time.time() * 1000)


def _bucket_path(storage: StorageGateway, bucket: str, url: Optional[str]) -> Optional[str]:
    """Object path of a public URL in ``bucket``; None for external or empty URLs."""
    prefix = storage.public_url(bucket, "")
    if url and url.startswith(prefix):
        return url[len(prefix):] or None
    return None


def upload_profile_picture(
    db: Session,
    storage: StorageGateway,
    user_id: str,
    filename: str,
    content_type: Optional[str],
    data: bytes,
) -> User:
    """Store a new avatar and point the user's profile at it."""
    if not data:
        raise BadRequestError("Uploaded file is empty.")
    if len(data) > settings.MAX_PROFILE_PICTURE_BYTES:
        raise BadRequestError(
            f"File too large. Maximum size is {settings.MAX_PROFILE_PICTURE_BYTES // (1024 * 1024)}MB."
        )

    user = get_user(db, user_id)
    extension = os.path.splitext(filename or "")[1].lower()
    if not _SAFE_EXTENSION.fullmatch(extension):
        extension = _IMAGE_EXTENSIONS.get(content_type or "", ".bin")

    previous_path = _bucket_path(storage, settings.PROFILE_PICTURE_BUCKET, user.picture_url)
    path = f"{user_id}/avatar_{_millis()}{extension}"
    user.picture_url = storage.upload(
        settings.PROFILE_PICTURE_BUCKET, path, data, content_type or "application/octet-stream"
    )
    try:
        persist(db, user)
    except BackendError:
        storage.remove(settings.PROFILE_PICTURE_BUCKET, path)
        raise

    if previous_path and previous_path != path:
        storage.remove(settings.PROFILE_PICTURE_BUCKET, previous_path)
    return user


def upload_class_routine(
    db: Session,
    storage: StorageGateway,
    actor: User,
    class_id: int,
    filename: str,
    content_type: Optional[str],
    data: bytes,
) -> ClassRoutine:
    """Replace the class routine PDF (one per class)."""
    authorize_class_moderator(db, actor, class_id)

    base, extension = os.path.splitext(os.path.basename(filename or ""))
    if extension.lower() != ".pdf":
        raise BadRequestError("invalid file type: only PDF files are allowed for routines")
    if not data:
        raise BadRequestError("Uploaded file is empty.")

    safe_base = _UNSAFE_CHARS.sub("_", base) or "routine"
    path = f"{class_id}/{safe_base}_{_millis()}.pdf"
    file_url = storage.upload(
        settings.CLASS_ROUTINE_BUCKET, path, data, content_type or "application/pdf"
    )

    routine = get_class_routine(db, class_id)
    previous_path = None
    if routine is None:
        routine = ClassRoutine(class_id=class_id)
        db.add(routine)
    else:
        previous_path = routine.file_path
    routine.file_name = os.path.basename(filename)
    routine.file_path = path
    routine.file_url = file_url
    routine.uploaded_by_id = actor.id
    try:
        persist(db, routine)
    except ForeignKeyViolation as exc:
        storage.remove(settings.CLASS_ROUTINE_BUCKET, path)
        raise NotFoundError("Class not found.") from exc
    except UniqueViolation as exc:
        # Another first upload for this class committed in between.
        storage.remove(settings.CLASS_ROUTINE_BUCKET, path)
        raise ConflictError(
            f"a routine for class {class_id} was uploaded concurrently; please retry"
        ) from exc
    except BackendError:
        storage.remove(settings.CLASS_ROUTINE_BUCKET, path)
        raise

    if previous_path and previous_path != path:
        storage.remove(settings.CLASS_ROUTINE_BUCKET, previous_path)
    logger.info("User %s uploaded routine for class %s", actor.id, class_id)
    return routine


def get_class_routine(db: Session, class_id: int) -> Optional[ClassRoutine]:
    return db.query(ClassRoutine).filter(ClassRoutine.class_id == class_id).first()


def delete_class_routine(
    db: Session, storage: StorageGateway, actor: User, class_id: int
) -> None:
    authorize_class_moderator(db, actor, class_id)
    routine = get_class_routine(db, class_id)
    if routine is None:
        raise NotFoundError(f"no routine found for class {class_id} to delete")

    path = routine.file_path
    db.delete(routine)
    persist(db)
    storage.remove(settings.CLASS_ROUTINE_BUCKET, path)
    logger.info("User %s deleted routine for class %s", actor.id, class_id)
