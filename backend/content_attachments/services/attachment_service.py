"""첨부파일 저장/버전 관리 도메인 서비스입니다.

첨부파일 본문은 버전마다 독립된 위치에 기록되고, 버전 번호 증가와
버전 스냅샷 행 추가는 항상 같은 세션 flush 안에서 일어납니다.
commit 은 호출자(바인딩/라우터)가 담당합니다.
"""

import logging
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from content_attachments.exceptions import InvalidVersion, MissingSectionOrFile, RecordNotFound
from content_attachments.models.attachment import Attachment, AttachmentVersion
from content_attachments.models.section import Section
from content_attachments.utils import storage
from content_attachments.utils.file_path import file_extension, to_visible_path
from content_attachments.utils.storage import UploadedFileLike

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = (
    "file_path",
    "section_id",
    "file_location",
    "file_name",
    "file_type",
    "file_extension",
    "file_size",
)

# file_name 컬럼 길이
MAX_FILE_NAME_LENGTH = 255


def get_attachment(db: Session, attachment_id: int) -> Attachment:
    attachment = db.query(Attachment).filter(Attachment.attachment_id == attachment_id).first()
    if not attachment:
        raise RecordNotFound("첨부파일을 찾을 수 없습니다.")
    return attachment


def create_attachment(
    db: Session,
    *,
    section: Optional[Section],
    path: Optional[str],
    upload: Optional[UploadedFileLike],
) -> Attachment:
    if section is None or upload is None:
        raise MissingSectionOrFile()

    data = storage.read_upload_bytes(upload)
    filename = getattr(upload, "filename", None)
    file_path = to_visible_path(path or filename)

    attachment = Attachment(
        version=1,
        file_path=file_path,
        section_id=section.section_id,
        file_location=storage.write_content(data),
        file_name=_clip_file_name(filename),
        file_type=getattr(upload, "content_type", None),
        file_extension=file_extension(file_path) or file_extension(filename),
        file_size=len(data),
    )
    db.add(attachment)
    _flush_with_version(db, attachment, attachment.file_location)
    logger.info(
        "[attachment] created attachment_id=%s path=%s section_id=%s",
        attachment.attachment_id,
        attachment.file_path,
        attachment.section_id,
    )
    return attachment


def update_attachment(
    db: Session,
    attachment: Attachment,
    *,
    path: Optional[str] = None,
    upload: Optional[UploadedFileLike] = None,
    section: Optional[Section] = None,
) -> Attachment:
    changed = []

    if upload is not None:
        data = storage.read_upload_bytes(upload)
        attachment.file_location = storage.write_content(data)
        attachment.file_name = _clip_file_name(getattr(upload, "filename", None)) or attachment.file_name
        attachment.file_type = getattr(upload, "content_type", None) or attachment.file_type
        attachment.file_size = len(data)
        changed.append("content")

    if path is not None:
        file_path = to_visible_path(path)
        if file_path != attachment.file_path:
            attachment.file_path = file_path
            attachment.file_extension = file_extension(file_path) or attachment.file_extension
            changed.append("path")

    if section is not None and section.section_id != attachment.section_id:
        attachment.section_id = section.section_id
        changed.append("section")

    if not changed:
        return attachment

    attachment.version = (attachment.version or 0) + 1
    _flush_with_version(db, attachment, attachment.file_location if "content" in changed else None)
    logger.info(
        "[attachment] updated attachment_id=%s version=%s changed=%s",
        attachment.attachment_id,
        attachment.version,
        ",".join(changed),
    )
    return attachment


def revert_attachment(db: Session, attachment: Attachment, version: int) -> Attachment:
    """이전 버전의 경로/본문을 가리키는 새 버전을 추가한다. 기존 버전은 그대로 남는다."""
    snapshot = version_at(db, attachment, version)
    if snapshot.version == attachment.version:
        return attachment

    for field in SNAPSHOT_FIELDS:
        setattr(attachment, field, getattr(snapshot, field))
    attachment.version = (attachment.version or 0) + 1
    _flush_with_version(db, attachment, None)
    logger.info(
        "[attachment] reverted attachment_id=%s to version=%s as version=%s",
        attachment.attachment_id,
        version,
        attachment.version,
    )
    return attachment


def version_at(db: Session, attachment: Attachment, version: int) -> AttachmentVersion:
    row = (
        db.query(AttachmentVersion)
        .filter(
            AttachmentVersion.attachment_id == attachment.attachment_id,
            AttachmentVersion.version == version,
        )
        .first()
    )
    if not row:
        raise InvalidVersion(version)
    return row


def list_versions(db: Session, attachment: Attachment) -> List[AttachmentVersion]:
    return (
        db.query(AttachmentVersion)
        .filter(AttachmentVersion.attachment_id == attachment.attachment_id)
        .order_by(AttachmentVersion.version.desc())
        .all()
    )


def full_file_location(target: Union[Attachment, AttachmentVersion]) -> str:
    return storage.full_path(target.file_location)


def read_content(target: Union[Attachment, AttachmentVersion]) -> bytes:
    with open(full_file_location(target), "rb") as f:
        return f.read()


def discard_written_files(file_locations: List[str]) -> None:
    for file_location in file_locations:
        try:
            storage.remove_content(file_location)
        except OSError as exc:
            logger.warning("[attachment] failed to discard %s: %s", file_location, exc)


def _clip_file_name(filename: Optional[str]) -> Optional[str]:
    return filename[:MAX_FILE_NAME_LENGTH] if filename else filename


def _append_version(db: Session, attachment: Attachment) -> AttachmentVersion:
    row = AttachmentVersion(
        attachment_id=attachment.attachment_id,
        version=attachment.version,
        **{field: getattr(attachment, field) for field in SNAPSHOT_FIELDS},
    )
    db.add(row)
    db.flush()
    return row


def _flush_with_version(db: Session, attachment: Attachment, written_location: Optional[str]) -> None:
    # flush 실패 시 방금 기록한 본문이 고아 파일로 남지 않게 한다.
    try:
        db.flush()
        _append_version(db, attachment)
    except Exception:
        if written_location:
            discard_written_files([written_location])
        raise
