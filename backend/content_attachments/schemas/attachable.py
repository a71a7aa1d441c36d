"""Attachable 콘텐츠 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from content_attachments.schemas.attachment import AttachmentVersionOut


class AttachableOut(BaseModel):
    id: int
    name: Optional[str] = None
    attachment_id: Optional[int] = None
    attachment_version: Optional[int] = None
    attachment_file_path: Optional[str] = None
    attachment_section_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VersionedAttachableOut(AttachableOut):
    version: int


class AttachableVersionOut(BaseModel):
    version: int
    name: Optional[str] = None
    attachment_id: Optional[int] = None
    attachment_version: Optional[int] = None
    attachment_file_path: Optional[str] = None
    version_comment: Optional[str] = None
    created_at: Optional[datetime] = None
    attachment: Optional[AttachmentVersionOut] = None

    model_config = {"from_attributes": True}
