"""Notice service — class and global announcements."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation
from nectar.errors import BadRequestError, ForbiddenError, NotFoundError
from nectar.models.notice import Notice
from nectar.models.user import User

logger = logging.getLogger(__name__)


def create_notice(db: Session, author_id: str, content: str, class_id: Optional[int]) -> Notice:
    """Create a class notice, or a global one when ``class_id`` is None."""
    notice = Notice(class_id=class_id, content=content, author_id=author_id)
    db.add(notice)
    try:
        persist(db, notice)
    except ForeignKeyViolation as exc:
        raise BadRequestError("Invalid ClassID: The specified class does not exist.") from exc
    logger.info("User %s posted notice %s (class %s)", author_id, notice.id, class_id)
    return notice


def list_class_notices(db: Session, class_id: int) -> list[Notice]:
    return (
        db.query(Notice)
        .filter(Notice.class_id == class_id)
        .order_by(Notice.created_at.desc())
        .all()
    )


def list_global_notices(db: Session) -> list[Notice]:
    return (
        db.query(Notice)
        .filter(Notice.class_id.is_(None))
        .order_by(Notice.created_at.desc())
        .all()
    )


def get_notice(db: Session, notice_id: int) -> Notice:
    notice = db.get(Notice, notice_id)
    if notice is None:
        raise NotFoundError(f"notice with ID {notice_id} not found")
    return notice


def update_notice(db: Session, notice_id: int, user: User, content: str) -> Notice:
    """Only the original author may edit a notice."""
    notice = get_notice(db, notice_id)
    if notice.author_id != user.id:
        raise ForbiddenError(
            f"user {user.id} is not authorized to update notice {notice_id} "
            f"(author is {notice.author_id})"
        )
    notice.content = content
    persist(db, notice)
    return notice


def delete_notice(db: Session, notice_id: int, user: User) -> None:
    """The author or an admin may delete a notice."""
    notice = get_notice(db, notice_id)
    if notice.author_id != user.id and user.role != "admin":
        raise ForbiddenError(
            f"user {user.id} is not authorized to delete notice {notice_id} "
            f"(author is {notice.author_id})"
        )
    db.delete(notice)
    persist(db)
    logger.info("User %s deleted notice %s", user.id, notice_id)
