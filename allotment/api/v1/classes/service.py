import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import NotFoundError, TransientError, ValidationError
from allotment.core.models import SchoolClass

from .schemas import ClassCreate, ClassResponse

logger = logging.getLogger(__name__)


async def list_classes(db: AsyncSession) -> List[ClassResponse]:
    """Newest first."""
    try:
        result = await db.execute(select(SchoolClass).order_by(SchoolClass.id.desc()))
        return [ClassResponse.model_validate(c) for c in result.scalars().all()]
    except SQLAlchemyError:
        logger.exception("Error fetching classes")
        raise TransientError("Failed to fetch classes")


async def create_class(db: AsyncSession, payload: ClassCreate) -> ClassResponse:
    name = (payload.name or "").strip()
    if not name:
        raise ValidationError("name is required")
    obj = SchoolClass(name=name)
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating class")
        raise TransientError("Failed to create class")
    return ClassResponse.model_validate(obj)


async def delete_class(db: AsyncSession, class_id: int) -> ClassResponse:
    """Delete a class; its allotments go with it (ON DELETE CASCADE)."""
    try:
        obj = await db.get(SchoolClass, class_id)
        if obj is None:
            raise NotFoundError("Class not found")
        deleted = ClassResponse.model_validate(obj)
        await db.delete(obj)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error deleting class {class_id}")
        raise TransientError("Failed to delete class")
    logger.info(f"Deleted class {class_id} and its allotments")
    return deleted
