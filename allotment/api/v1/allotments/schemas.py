from datetime import datetime
from typing import Optional

from allotment.core.schemas import CamelModel


class AllotmentCreate(CamelModel):
    """Body of POST /api/create-allotment. Fields are optional here so a missing id is a 400, not a 422."""

    student_id: Optional[int] = None
    class_id: Optional[int] = None
    section_id: Optional[int] = None


class AllotmentUpdate(CamelModel):
    class_id: Optional[int] = None
    section_id: Optional[int] = None


class AllotmentView(CamelModel):
    """Allotment joined with student, class and section names."""

    id: int
    created_at: datetime
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    student_age: Optional[int] = None
    class_id: Optional[int] = None
    class_name: Optional[str] = None
    section_id: Optional[int] = None
    section_name: Optional[str] = None
