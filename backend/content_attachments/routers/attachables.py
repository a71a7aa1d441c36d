"""Attachables 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from content_attachments.database import get_db
from content_attachments.exceptions import RecordNotFound
from content_attachments.models.attachable import Attachable
from content_attachments.schemas.attachable import AttachableOut
from content_attachments.services.attachment_binding import AttachmentBinding, to_response
from content_attachments.utils.storage import read_upload

router = APIRouter(prefix="/api/attachables", tags=["attachables"])


def _get_attachable(db: Session, attachable_id: int) -> Attachable:
    record = db.query(Attachable).filter(Attachable.id == attachable_id).first()
    if not record:
        raise RecordNotFound()
    return record


@router.get("", response_model=List[AttachableOut])
def list_attachables(db: Session = Depends(get_db)):
    records = db.query(Attachable).order_by(Attachable.id.asc()).all()
    return [to_response(AttachmentBinding(db, record)) for record in records]


@router.post("", response_model=AttachableOut)
async def create_attachable(
    name: Optional[str] = Form(None),
    attachment_section_id: Optional[int] = Form(None),
    attachment_file_path: Optional[str] = Form(None),
    attachment_file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    binding = AttachmentBinding(
        db,
        Attachable(name=name),
        attachment_section_id=attachment_section_id,
        attachment_file_path=attachment_file_path,
        attachment_file=await read_upload(attachment_file),
    )
    binding.save()
    return to_response(binding)


@router.get("/{attachable_id}", response_model=AttachableOut)
def get_attachable(attachable_id: int, db: Session = Depends(get_db)):
    return to_response(AttachmentBinding(db, _get_attachable(db, attachable_id)))


@router.put("/{attachable_id}", response_model=AttachableOut)
async def update_attachable(
    attachable_id: int,
    name: Optional[str] = Form(None),
    attachment_section_id: Optional[int] = Form(None),
    attachment_file_path: Optional[str] = Form(None),
    attachment_file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    binding = AttachmentBinding(db, _get_attachable(db, attachable_id))
    attrs = {
        "name": name,
        "attachment_section_id": attachment_section_id,
        "attachment_file_path": attachment_file_path,
        "attachment_file": await read_upload(attachment_file),
    }
    binding.update(**{k: v for k, v in attrs.items() if v is not None})
    return to_response(binding)
