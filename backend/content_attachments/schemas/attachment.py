"""Attachment 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AttachmentVersionOut(BaseModel):
    attachment_id: int
    version: int
    file_path: str
    section_id: int
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_extension: Optional[str] = None
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AttachmentOut(AttachmentVersionOut):
    updated_at: Optional[datetime] = None
