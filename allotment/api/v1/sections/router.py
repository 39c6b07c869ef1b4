from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ServiceError
from allotment.core.schemas import ApiResponse
from allotment.db.session import get_db

from .schemas import SectionCreate, SectionResponse
from . import service

router = APIRouter(prefix="/api/sections", tags=["sections"])


@router.get("", response_model=ApiResponse[List[SectionResponse]])
async def list_sections(db: AsyncSession = Depends(get_db)) -> ApiResponse[List[SectionResponse]]:
    try:
        return ApiResponse(data=await service.list_sections(db))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=ApiResponse[SectionResponse], status_code=status.HTTP_201_CREATED)
async def create_section(
    payload: SectionCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SectionResponse]:
    try:
        return ApiResponse(data=await service.create_section(db, payload), message="Section created")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{section_id}", response_model=ApiResponse[SectionResponse])
async def delete_section(
    section_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SectionResponse]:
    """Remove a section together with every allotment that references it."""
    try:
        return ApiResponse(data=await service.delete_section(db, section_id), message="Section deleted")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
