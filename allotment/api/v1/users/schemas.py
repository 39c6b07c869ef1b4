from typing import Optional

from pydantic import Field

from allotment.core.schemas import CamelModel


class UserCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    age: Optional[int] = None
    email: Optional[str] = Field(None, max_length=255)


class UserUpdate(CamelModel):
    """Partial update: only the provided fields change."""

    name: Optional[str] = Field(None, max_length=255)
    age: Optional[int] = None
    email: Optional[str] = Field(None, max_length=255)


class UserResponse(CamelModel):
    id: int
    name: str
    age: int
    email: str
