from typing import Optional

from pydantic import Field

from allotment.core.schemas import CamelModel


class SectionCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=50)


class SectionResponse(CamelModel):
    id: int
    name: str
