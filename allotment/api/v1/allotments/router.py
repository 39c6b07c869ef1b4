from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ServiceError
from allotment.core.schemas import ApiResponse
from allotment.db.session import get_db

from .schemas import AllotmentCreate, AllotmentUpdate, AllotmentView
from . import service

router = APIRouter(prefix="/api", tags=["allotments"])


@router.get("/allotments", response_model=ApiResponse[List[AllotmentView]])
async def list_allotments(db: AsyncSession = Depends(get_db)) -> ApiResponse[List[AllotmentView]]:
    try:
        return ApiResponse(data=await service.list_allotments(db))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/create-allotment",
    response_model=ApiResponse[AllotmentView],
    status_code=status.HTTP_201_CREATED,
)
async def create_allotment(
    payload: AllotmentCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AllotmentView]:
    try:
        data = await service.create_allotment(db, payload)
        return ApiResponse(data=data, message="Allotment created successfully")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/allotments/{allotment_id}", response_model=ApiResponse[AllotmentView])
async def update_allotment(
    allotment_id: int,
    payload: AllotmentUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AllotmentView]:
    try:
        data = await service.update_allotment(db, allotment_id, payload)
        return ApiResponse(data=data, message="Allotment updated successfully")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/allotments/{allotment_id}", response_model=ApiResponse[AllotmentView])
async def delete_allotment(
    allotment_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AllotmentView]:
    try:
        data = await service.delete_allotment(db, allotment_id)
        return ApiResponse(data=data, message="Allotment deleted successfully")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
