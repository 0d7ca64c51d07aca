"""Class event service — CR-managed tests, quizzes, deadlines and holidays."""

import logging

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation
from nectar.errors import BadRequestError, NotFoundError
from nectar.models.class_event import ClassEvent
from nectar.models.user import User
from nectar.services.authorization import authorize_class_moderator

logger = logging.getLogger(__name__)


def create_event(db: Session, actor: User, class_id: int, data) -> ClassEvent:
    authorize_class_moderator(db, actor, class_id)
    event = ClassEvent(
        class_id=class_id,
        event_type=data.event_type,
        title=data.title,
        description=data.description or None,
        event_date=data.event_date,
        created_by_id=actor.id,
    )
    db.add(event)
    try:
        persist(db, event)
    except ForeignKeyViolation as exc:
        raise BadRequestError("Invalid data for event (e.g., class_id).") from exc
    logger.info("User %s created %s event %s in class %s", actor.id, event.event_type, event.id, class_id)
    return event


def list_events(db: Session, class_id: int) -> list[ClassEvent]:
    return (
        db.query(ClassEvent)
        .filter(ClassEvent.class_id == class_id)
        .order_by(ClassEvent.event_date)
        .all()
    )


def _get_class_event(db: Session, class_id: int, event_id: int) -> ClassEvent:
    event = db.get(ClassEvent, event_id)
    if event is None:
        raise NotFoundError(f"event with ID {event_id} not found")
    if event.class_id != class_id:
        raise NotFoundError(f"event ID {event_id} does not belong to class ID {class_id}")
    return event


def update_event(db: Session, actor: User, class_id: int, event_id: int, data) -> ClassEvent:
    authorize_class_moderator(db, actor, class_id)
    event = _get_class_event(db, class_id, event_id)
    event.event_type = data.event_type
    event.title = data.title
    event.description = data.description or None
    event.event_date = data.event_date
    persist(db, event)
    return event


def delete_event(db: Session, actor: User, class_id: int, event_id: int) -> None:
    authorize_class_moderator(db, actor, class_id)
    event = _get_class_event(db, class_id, event_id)
    db.delete(event)
    persist(db)
    logger.info("User %s deleted event %s from class %s", actor.id, event_id, class_id)
