"""Attachments 조회 API 라우터입니다. 버전별 본문 다운로드를 제공합니다."""

import os
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from content_attachments.database import get_db
from content_attachments.schemas.attachment import AttachmentOut, AttachmentVersionOut
from content_attachments.services import attachment_service

router = APIRouter(prefix="/api/attachments", tags=["attachments"])


@router.get("/{attachment_id}", response_model=AttachmentOut)
def get_attachment(attachment_id: int, db: Session = Depends(get_db)):
    return attachment_service.get_attachment(db, attachment_id)


@router.get("/{attachment_id}/versions", response_model=List[AttachmentVersionOut])
def list_attachment_versions(attachment_id: int, db: Session = Depends(get_db)):
    attachment = attachment_service.get_attachment(db, attachment_id)
    return attachment_service.list_versions(db, attachment)


@router.get("/{attachment_id}/versions/{version}", response_model=AttachmentVersionOut)
def get_attachment_version(attachment_id: int, version: int, db: Session = Depends(get_db)):
    attachment = attachment_service.get_attachment(db, attachment_id)
    return attachment_service.version_at(db, attachment, version)


@router.get("/{attachment_id}/versions/{version}/content")
def download_attachment_version(attachment_id: int, version: int, db: Session = Depends(get_db)):
    attachment = attachment_service.get_attachment(db, attachment_id)
    snapshot = attachment_service.version_at(db, attachment, version)
    path = attachment_service.full_file_location(snapshot)
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail="첨부파일 본문을 찾을 수 없습니다.")
    return FileResponse(
        path,
        media_type=snapshot.file_type or "application/octet-stream",
        filename=snapshot.file_path.lstrip("/"),
    )
