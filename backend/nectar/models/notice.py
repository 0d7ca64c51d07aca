"""Notice model. A notice without a class is global."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from nectar.database import Base


class Notice(Base):
    __tablename__ = "notices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", name="notices_class_id_fkey"), nullable=True
    )
    content = Column(Text, nullable=False)
    author_id = Column(
        String(36), ForeignKey("users.id", name="notices_author_id_fkey"), nullable=False
    )
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    class_ = relationship("Class")
