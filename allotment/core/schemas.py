"""Shared response envelope and the camelCase base used on the wire."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case in Python, camelCase in JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every response: {success, data?, message?}."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
