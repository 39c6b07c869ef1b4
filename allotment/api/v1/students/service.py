import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import NotFoundError, TransientError, ValidationError
from allotment.core.models import Student

from .schemas import StudentCreate, StudentResponse

logger = logging.getLogger(__name__)


async def list_students(db: AsyncSession) -> List[StudentResponse]:
    """Newest first."""
    try:
        result = await db.execute(select(Student).order_by(Student.id.desc()))
        return [StudentResponse.model_validate(s) for s in result.scalars().all()]
    except SQLAlchemyError:
        logger.exception("Error fetching students")
        raise TransientError("Failed to fetch students")


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    name = (payload.name or "").strip()
    if not name or not payload.age:
        raise ValidationError("name and age are required")
    obj = Student(name=name, age=payload.age)
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating student")
        raise TransientError("Failed to create student")
    return StudentResponse.model_validate(obj)


async def delete_student(db: AsyncSession, student_id: int) -> StudentResponse:
    """Delete a student. Allotments referencing the student are removed by the FK cascade."""
    try:
        obj = await db.get(Student, student_id)
        if obj is None:
            raise NotFoundError("Student not found")
        deleted = StudentResponse.model_validate(obj)
        await db.delete(obj)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error deleting student {student_id}")
        raise TransientError("Failed to delete student")
    logger.info(f"Deleted student {student_id} and its allotments")
    return deleted
