"""Global search across users, courses, classes, departments, notices and events.

Every (entity, column) pair is its own capped ILIKE query. Results are
merged in query order and de-duplicated on (type, id); a failing query is
recorded and the search carries on with the others.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nectar.models.class_ import Class
from nectar.models.class_event import ClassEvent
from nectar.models.course import Course
from nectar.models.department import Department
from nectar.models.notice import Notice
from nectar.models.user import User

logger = logging.getLogger(__name__)

MAX_RESULTS_PER_QUERY = 5
MAX_NOTICE_RESULTS = 10


def _pattern(query: str) -> str:
    escaped = query.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class _SearchRun:
    def __init__(self, db: Session, query: str):
        self.db = db
        self.query = query
        self.pattern = _pattern(query)
        self.items: list[dict] = []
        self.errors: list[str] = []
        self._seen: set[tuple[str, str]] = set()

    def add(self, type_: str, id_, title: str, subtitle: Optional[str]) -> None:
        key = (type_, str(id_))
        if key in self._seen:
            return
        self._seen.add(key)
        self.items.append({"type": type_, "id": str(id_), "title": title, "subtitle": subtitle})

    def fetch(self, label: str, model, column, limit: int = MAX_RESULTS_PER_QUERY) -> list:
        try:
            return (
                self.db.query(model)
                .filter(column.ilike(self.pattern, escape="\\"))
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.errors.append(f"{label} search failed: {exc}")
            logger.warning("Search query %s failed for %r: %s", label, self.query, exc)
            return []

    def class_codes(self, class_ids: set) -> dict:
        if not class_ids:
            return {}
        try:
            return {
                c.id: c.code for c in self.db.query(Class).filter(Class.id.in_(class_ids))
            }
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.errors.append(f"class lookup failed: {exc}")
            return {}


def _search_users(run: _SearchRun) -> None:
    for column, label in (
        (User.full_name, "users (name)"),
        (User.email, "users (email)"),
        (User.student_id, "users (student_id)"),
    ):
        for u in run.fetch(label, User, column):
            if u.role in ("student", "cr") and u.student_id:
                subtitle = f"{u.role} (ID: {u.student_id})"
            else:
                subtitle = u.email
            run.add("User", u.id, u.full_name, subtitle)


def _search_courses(run: _SearchRun) -> None:
    for column, label in ((Course.code, "courses (code)"), (Course.name, "courses (name)")):
        for c in run.fetch(label, Course, column):
            run.add("Course", c.id, c.name, c.code)


def _search_classes(run: _SearchRun) -> None:
    for column, label in (
        (Class.code, "classes (code)"),
        (Class.session, "classes (session)"),
        (Class.section, "classes (section)"),
    ):
        for c in run.fetch(label, Class, column):
            subtitle = f"{c.session} - Section {c.section}" if c.section else c.session
            run.add("Class", c.id, c.code, subtitle)


def _search_departments(run: _SearchRun) -> None:
    for column, label in ((Department.code, "departments (code)"), (Department.name, "departments (name)")):
        for d in run.fetch(label, Department, column):
            run.add("Department", d.id, d.name, d.code)


def _search_notices(run: _SearchRun) -> None:
    notices = run.fetch("notices", Notice, Notice.content, limit=MAX_NOTICE_RESULTS)
    codes = run.class_codes({n.class_id for n in notices if n.class_id is not None})
    for n in notices:
        title = n.content
        if len(title) > 50:
            title = title[:47] + "..."
        if n.class_id is None:
            subtitle = "Global Notice"
        else:
            subtitle = f"Class Notice ({codes.get(n.class_id, 'Unknown Class')})"
        run.add("Notice", n.id, title, subtitle)


def _search_events(run: _SearchRun) -> None:
    events = run.fetch("class_events (title)", ClassEvent, ClassEvent.title)
    events += run.fetch("class_events (description)", ClassEvent, ClassEvent.description)
    codes = run.class_codes({e.class_id for e in events})
    for e in events:
        code = codes.get(e.class_id, "Unknown")
        run.add("Class Event", e.id, e.title, f"For Class {code} - {e.event_type} ({e.event_date})")


_SECTIONS: tuple[Callable[[_SearchRun], None], ...] = (
    _search_users,
    _search_courses,
    _search_classes,
    _search_departments,
    _search_notices,
    _search_events,
)


def global_search(db: Session, query: str) -> tuple[list[dict], Optional[str]]:
    """Run every section; returns (items, combined error message or None)."""
    run = _SearchRun(db, query)
    for section in _SECTIONS:
        section(run)

    error = None
    if run.errors:
        error = "global search completed with errors: " + "; ".join(run.errors)
    return run.items, error
