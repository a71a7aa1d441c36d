import os
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from fastapi import UploadFile

from content_attachments.config import settings
from content_attachments.exceptions import AttachmentTooLarge


class UploadedFileLike(Protocol):
    filename: Optional[str]

    def read(self) -> bytes: ...


@dataclass
class UploadedContent:
    """요청 본문에서 읽어 둔 업로드 파일. 서비스 레이어는 동기 read()만 사용한다."""

    filename: str
    content: bytes
    content_type: Optional[str] = None

    def read(self) -> bytes:
        return self.content

    @property
    def size(self) -> int:
        return len(self.content)


async def read_upload(file: Optional[UploadFile]) -> Optional[UploadedContent]:
    if file is None or not file.filename:
        return None
    content = await file.read()
    return UploadedContent(filename=file.filename, content=content, content_type=file.content_type)


def read_upload_bytes(upload: UploadedFileLike) -> bytes:
    if hasattr(upload, "seek"):
        upload.seek(0)
    data = upload.read()
    if isinstance(data, str):
        data = data.encode("utf-8")
    if len(data) > settings.MAX_UPLOAD_SIZE:
        raise AttachmentTooLarge(settings.MAX_UPLOAD_SIZE)
    return data


def write_content(data: bytes, now: Optional[datetime] = None) -> str:
    """본문을 새 위치에 기록하고 저장 루트 기준 상대 경로를 돌려준다."""
    now = now or datetime.now()
    file_location = f"{now:%Y/%m/%d}/{uuid.uuid4().hex}"
    path = full_path(file_location)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "wb") as f:
        f.write(data)

    return file_location


def full_path(file_location: str) -> str:
    return os.path.abspath(os.path.join(settings.attachment_storage_root(), *file_location.split("/")))


def remove_content(file_location: str) -> bool:
    path = full_path(file_location)
    if not os.path.exists(path):
        return False
    os.remove(path)
    return True
