from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ServiceError
from allotment.core.schemas import ApiResponse
from allotment.db.session import get_db

from .schemas import UserCreate, UserResponse, UserUpdate
from . import service

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users", response_model=ApiResponse[List[UserResponse]])
async def list_users(db: AsyncSession = Depends(get_db)) -> ApiResponse[List[UserResponse]]:
    try:
        return ApiResponse(data=await service.list_users(db))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/create-user", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    try:
        return ApiResponse(data=await service.create_user(db, payload), message="User created")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/user/{email}", response_model=ApiResponse[List[UserResponse]])
async def get_users_by_email(email: str, db: AsyncSession = Depends(get_db)) -> ApiResponse[List[UserResponse]]:
    return ApiResponse(data=await service.get_users_by_email(db, email))


@router.put("/user/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    try:
        return ApiResponse(data=await service.update_user(db, user_id, payload), message="User updated")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/user/{user_id}", response_model=ApiResponse[UserResponse])
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    try:
        return ApiResponse(data=await service.delete_user(db, user_id), message="User deleted")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
