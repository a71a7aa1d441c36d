"""버전 관리되는 Attachable API 라우터입니다. 버전 이력 조회와 복원을 함께 제공합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from content_attachments.database import get_db
from content_attachments.exceptions import RecordNotFound
from content_attachments.models.attachable import VersionedAttachable
from content_attachments.schemas.attachable import AttachableVersionOut, VersionedAttachableOut
from content_attachments.services import record_version_service
from content_attachments.services.attachment_binding import AttachmentBinding, to_response
from content_attachments.utils.storage import read_upload

router = APIRouter(prefix="/api/versioned-attachables", tags=["versioned-attachables"])


def _get_record(db: Session, record_id: int) -> VersionedAttachable:
    record = db.query(VersionedAttachable).filter(VersionedAttachable.id == record_id).first()
    if not record:
        raise RecordNotFound()
    return record


@router.get("", response_model=List[VersionedAttachableOut])
def list_versioned_attachables(db: Session = Depends(get_db)):
    records = db.query(VersionedAttachable).order_by(VersionedAttachable.id.asc()).all()
    return [to_response(AttachmentBinding(db, record)) for record in records]


@router.post("", response_model=VersionedAttachableOut)
async def create_versioned_attachable(
    name: Optional[str] = Form(None),
    attachment_section_id: Optional[int] = Form(None),
    attachment_file_path: Optional[str] = Form(None),
    attachment_file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    binding = AttachmentBinding(
        db,
        VersionedAttachable(name=name),
        attachment_section_id=attachment_section_id,
        attachment_file_path=attachment_file_path,
        attachment_file=await read_upload(attachment_file),
    )
    binding.save()
    return to_response(binding)


@router.get("/{record_id}", response_model=VersionedAttachableOut)
def get_versioned_attachable(record_id: int, db: Session = Depends(get_db)):
    return to_response(AttachmentBinding(db, _get_record(db, record_id)))


@router.put("/{record_id}", response_model=VersionedAttachableOut)
async def update_versioned_attachable(
    record_id: int,
    name: Optional[str] = Form(None),
    attachment_section_id: Optional[int] = Form(None),
    attachment_file_path: Optional[str] = Form(None),
    attachment_file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    binding = AttachmentBinding(db, _get_record(db, record_id))
    attrs = {
        "name": name,
        "attachment_section_id": attachment_section_id,
        "attachment_file_path": attachment_file_path,
        "attachment_file": await read_upload(attachment_file),
    }
    binding.update(**{k: v for k, v in attrs.items() if v is not None})
    return to_response(binding)


@router.get("/{record_id}/versions", response_model=List[AttachableVersionOut])
def list_versions(record_id: int, db: Session = Depends(get_db)):
    record = _get_record(db, record_id)
    return record_version_service.list_record_versions(db, record)


@router.get("/{record_id}/versions/{version}", response_model=AttachableVersionOut)
def get_version(record_id: int, version: int, db: Session = Depends(get_db)):
    record = _get_record(db, record_id)
    return record_version_service.as_of_version(db, record, version)


@router.post("/{record_id}/revert/{version}", response_model=VersionedAttachableOut)
def revert_version(record_id: int, version: int, db: Session = Depends(get_db)):
    record = record_version_service.revert_to(db, _get_record(db, record_id), version)
    return to_response(AttachmentBinding(db, record))
