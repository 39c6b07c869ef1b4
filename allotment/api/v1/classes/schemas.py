from typing import Optional

from pydantic import Field

from allotment.core.schemas import CamelModel


class ClassCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)


class ClassResponse(CamelModel):
    id: int
    name: str
