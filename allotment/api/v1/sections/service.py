import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import NotFoundError, TransientError, ValidationError
from allotment.core.models import Section

from .schemas import SectionCreate, SectionResponse

logger = logging.getLogger(__name__)


async def list_sections(db: AsyncSession) -> List[SectionResponse]:
    """Newest first."""
    try:
        result = await db.execute(select(Section).order_by(Section.id.desc()))
        return [SectionResponse.model_validate(s) for s in result.scalars().all()]
    except SQLAlchemyError:
        logger.exception("Error fetching sections")
        raise TransientError("Failed to fetch sections")


async def create_section(db: AsyncSession, payload: SectionCreate) -> SectionResponse:
    name = (payload.name or "").strip()
    if not name:
        raise ValidationError("name is required")
    obj = Section(name=name)
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating section")
        raise TransientError("Failed to create section")
    return SectionResponse.model_validate(obj)


async def delete_section(db: AsyncSession, section_id: int) -> SectionResponse:
    try:
        obj = await db.get(Section, section_id)
        if obj is None:
            raise NotFoundError("Section not found")
        deleted = SectionResponse.model_validate(obj)
        await db.delete(obj)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error deleting section {section_id}")
        raise TransientError("Failed to delete section")
    logger.info(f"Deleted section {section_id} and its allotments")
    return deleted
