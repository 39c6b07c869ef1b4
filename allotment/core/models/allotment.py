"""Assignment of one student to one (class, section) pair. The triple is unique."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from allotment.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Allotment(Base):
    """Deleting the student, class or section removes the allotment (ON DELETE CASCADE)."""

    __tablename__ = "allotments"
    __table_args__ = (
        UniqueConstraint("student_id", "class_id", "section_id", name="unique_student_allotment"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    student = relationship("Student", foreign_keys=[student_id])
    school_class = relationship("SchoolClass", foreign_keys=[class_id])
    section = relationship("Section", foreign_keys=[section_id])
