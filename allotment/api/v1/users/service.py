"""Generic user management used by the users screen (list, create, look up by email, edit, delete)."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.exceptions import ConflictError, NotFoundError, TransientError, ValidationError
from allotment.core.models import User

from .schemas import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def list_users(db: AsyncSession) -> List[UserResponse]:
    """Newest first."""
    try:
        result = await db.execute(select(User).order_by(User.id.desc()))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise TransientError("Failed to fetch users")


async def get_users_by_email(db: AsyncSession, email: str) -> List[UserResponse]:
    result = await db.execute(select(User).where(User.email == _normalize_email(email)))
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


async def create_user(db: AsyncSession, payload: UserCreate) -> UserResponse:
    name = (payload.name or "").strip()
    email = _normalize_email(payload.email or "")
    if not name or not payload.age or not email:
        raise ValidationError("Name, age, and email required")
    obj = User(name=name, age=payload.age, email=email)
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already exists")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating user")
        raise TransientError("Internal server error")
    return UserResponse.model_validate(obj)


async def update_user(db: AsyncSession, user_id: int, payload: UserUpdate) -> UserResponse:
    if not payload.name and not payload.age and not payload.email:
        raise ValidationError("Provide at least one field to update")
    obj = await db.get(User, user_id)
    if obj is None:
        raise NotFoundError("User not found")
    if payload.name:
        obj.name = payload.name.strip()
    if payload.age:
        obj.age = payload.age
    if payload.email:
        obj.email = _normalize_email(payload.email)
    try:
        await db.commit()
        await db.refresh(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already exists")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error updating user {user_id}")
        raise TransientError("Internal server error")
    return UserResponse.model_validate(obj)


async def delete_user(db: AsyncSession, user_id: int) -> UserResponse:
    obj = await db.get(User, user_id)
    if obj is None:
        raise NotFoundError("User not found")
    deleted = UserResponse.model_validate(obj)
    try:
        await db.delete(obj)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Error deleting user {user_id}")
        raise TransientError("Internal server error")
    return deleted
