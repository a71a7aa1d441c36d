"""Section 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SectionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    parent_id: Optional[int] = None


class SectionOut(BaseModel):
    section_id: int
    name: str
    parent_id: Optional[int] = None
    path: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
