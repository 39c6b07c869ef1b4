from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ServiceError
from allotment.core.schemas import ApiResponse
from allotment.db.session import get_db

from .schemas import ClassCreate, ClassResponse
from . import service

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("", response_model=ApiResponse[List[ClassResponse]])
async def list_classes(db: AsyncSession = Depends(get_db)) -> ApiResponse[List[ClassResponse]]:
    try:
        return ApiResponse(data=await service.list_classes(db))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=ApiResponse[ClassResponse], status_code=status.HTTP_201_CREATED)
async def create_class(
    payload: ClassCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ClassResponse]:
    try:
        return ApiResponse(data=await service.create_class(db, payload), message="Class created")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{class_id}", response_model=ApiResponse[ClassResponse])
async def delete_class(
    class_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ClassResponse]:
    try:
        return ApiResponse(data=await service.delete_class(db, class_id), message="Class deleted")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
