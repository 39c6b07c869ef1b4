from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ServiceError
from allotment.core.schemas import ApiResponse
from allotment.db.session import get_db

from .schemas import StudentCreate, StudentResponse
from . import service

router = APIRouter(prefix="/api/students", tags=["students"])


@router.get("", response_model=ApiResponse[List[StudentResponse]])
async def list_students(db: AsyncSession = Depends(get_db)) -> ApiResponse[List[StudentResponse]]:
    try:
        return ApiResponse(data=await service.list_students(db))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=ApiResponse[StudentResponse], status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    try:
        return ApiResponse(data=await service.create_student(db, payload), message="Student created")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{student_id}", response_model=ApiResponse[StudentResponse])
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    """Remove a student together with every allotment that references it."""
    try:
        return ApiResponse(data=await service.delete_student(db, student_id), message="Student deleted")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
