"""Allotment store: create, list, re-allot and remove students' class/section assignments.

Duplicates are rejected by the unique index on (student_id, class_id, section_id); there is
no read-before-write check, so two operators racing on the same triple get one row and one 409.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ConflictError, NotFoundError, TransientError, ValidationError
from allotment.core.models import Allotment, SchoolClass, Section, Student

from .schemas import AllotmentCreate, AllotmentUpdate, AllotmentView

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "This student is already allotted to the same class and section"


def _is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg: 'duplicate key value violates unique constraint'; sqlite: 'UNIQUE constraint failed'
    msg = str(exc.orig).lower()
    return "duplicate key" in msg or "unique" in msg


def _view_query():
    return (
        select(
            Allotment.id,
            Allotment.created_at,
            Student.id.label("student_id"),
            Student.name.label("student_name"),
            Student.age.label("student_age"),
            SchoolClass.id.label("class_id"),
            SchoolClass.name.label("class_name"),
            Section.id.label("section_id"),
            Section.name.label("section_name"),
        )
        .select_from(Allotment)
        .outerjoin(Student, Allotment.student_id == Student.id)
        .outerjoin(SchoolClass, Allotment.class_id == SchoolClass.id)
        .outerjoin(Section, Allotment.section_id == Section.id)
    )


def _row_to_view(row) -> AllotmentView:
    return AllotmentView(
        id=row.id,
        created_at=row.created_at,
        student_id=row.student_id,
        student_name=row.student_name,
        student_age=row.student_age,
        class_id=row.class_id,
        class_name=row.class_name,
        section_id=row.section_id,
        section_name=row.section_name,
    )


async def _get_view(db: AsyncSession, allotment_id: int) -> Optional[AllotmentView]:
    result = await db.execute(_view_query().where(Allotment.id == allotment_id))
    row = result.one_or_none()
    return _row_to_view(row) if row is not None else None


async def list_allotments(db: AsyncSession) -> List[AllotmentView]:
    try:
        result = await db.execute(_view_query().order_by(Allotment.id))
        return [_row_to_view(row) for row in result.all()]
    except SQLAlchemyError:
        logger.exception("Error fetching allotments")
        raise TransientError("Failed to fetch allotments")


async def create_allotment(db: AsyncSession, payload: AllotmentCreate) -> AllotmentView:
    if not payload.student_id or not payload.class_id or not payload.section_id:
        raise ValidationError("studentId, classId, and sectionId are required")
    obj = Allotment(
        student_id=payload.student_id,
        class_id=payload.class_id,
        section_id=payload.section_id,
    )
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except IntegrityError as e:
        await db.rollback()
        if _is_unique_violation(e):
            raise ConflictError(DUPLICATE_MESSAGE)
        raise ValidationError("Student, class or section does not exist")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating allotment")
        raise TransientError("Internal server error")
    logger.info(
        f"Allotted student {obj.student_id} to class {obj.class_id} section {obj.section_id} (allotment {obj.id})"
    )
    return await _get_view(db, obj.id)


async def update_allotment(db: AsyncSession, allotment_id: int, payload: AllotmentUpdate) -> AllotmentView:
    """Re-allot to another class/section. Student and creation time never change."""
    if not payload.class_id or not payload.section_id:
        raise ValidationError("classId and sectionId are required")
    try:
        result = await db.execute(
            update(Allotment)
            .where(Allotment.id == allotment_id)
            .values(class_id=payload.class_id, section_id=payload.section_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError("Allotment not found")
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if _is_unique_violation(e):
            raise ConflictError(DUPLICATE_MESSAGE)
        raise ValidationError("Class or section does not exist")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error updating allotment {allotment_id}")
        raise TransientError("Failed to update allotment")
    view = await _get_view(db, allotment_id)
    if view is None:
        # Removed by another operator between the update and the read.
        raise NotFoundError("Allotment not found")
    return view


async def delete_allotment(db: AsyncSession, allotment_id: int) -> AllotmentView:
    try:
        view = await _get_view(db, allotment_id)
        if view is None:
            raise NotFoundError("Allotment not found")
        result = await db.execute(
            delete(Allotment)
            .where(Allotment.id == allotment_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError("Allotment not found")
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error deleting allotment {allotment_id}")
        raise TransientError("Failed to delete allotment")
    logger.info(f"Removed allotment {allotment_id} (student {view.student_id})")
    return view
