from typing import Optional

from pydantic import Field

from allotment.core.schemas import CamelModel


class StudentCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    age: Optional[int] = Field(None, ge=1)


class StudentResponse(CamelModel):
    id: int
    name: str
    age: int
