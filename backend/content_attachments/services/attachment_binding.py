"""콘텐츠 레코드와 첨부파일을 연결하는 바인딩 서비스입니다.

레코드 저장은 ``AttachmentBinding.save()`` 한 곳에서만 일어납니다.
검증 -> 첨부파일 생성/갱신 -> (버전 관리 대상이면) 레코드 버전 추가 -> commit
순서로 진행하고, 중간에 실패하면 rollback 과 함께 이번 저장에서 기록한
첨부파일 본문을 지워 레코드/첨부파일/버전 테이블을 저장 전 상태로 남깁니다.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Session

from content_attachments.exceptions import MissingSectionOrFile
from content_attachments.models.attachment import Attachment
from content_attachments.models.section import Section
from content_attachments.services import attachment_service, record_version_service, section_service
from content_attachments.utils.storage import UploadedFileLike

logger = logging.getLogger(__name__)

ATTACHMENT_ATTRIBUTES = (
    "attachment_section_id",
    "attachment_section",
    "attachment_file",
    "attachment_file_path",
)

# 새 레코드 저장이 거절되면 저장 전 값으로 되돌리는 필드
RESTORED_ON_REJECT = ("id", "attachment_id", "attachment_version", "version")


class HasAttachment(Protocol):
    attachment_id: Optional[int]
    attachment_version: Optional[int]
    attachment: Optional[Attachment]


def belongs_to_attachment(model_cls: Any) -> bool:
    """모델 타입이 첨부파일 컬럼(attachment_id/attachment_version)과 Attachment 관계를 갖는지."""
    try:
        mapper = sa_inspect(model_cls)
    except NoInspectionAvailable:
        return False
    if not {"attachment_id", "attachment_version"} <= set(mapper.columns.keys()):
        return False
    if "attachment" not in mapper.relationships:
        return False
    return mapper.relationships["attachment"].mapper.class_ is Attachment


class AttachmentBinding:
    def __init__(self, db: Session, record: HasAttachment, *, versioned: Optional[bool] = None, **attrs):
        if not belongs_to_attachment(type(record)):
            raise TypeError(f"{type(record).__name__} does not belong to an attachment")
        self.db = db
        self.record = record
        self.versioned = record_version_service.is_versioned(type(record)) if versioned is None else versioned
        self._section_id: Optional[int] = None
        self._section: Optional[Section] = None
        self._file: Optional[UploadedFileLike] = None
        self._file_path: Optional[str] = None
        self.assign_attributes(**attrs)

    # -- attachment attributes -------------------------------------------------

    @property
    def attachment_section_id(self) -> Optional[int]:
        if self._section_id is not None:
            return self._section_id
        attachment = self.record.attachment
        return attachment.section_id if attachment else None

    @attachment_section_id.setter
    def attachment_section_id(self, value: Optional[int]) -> None:
        self._section_id = int(value) if value is not None else None
        self._section = None

    @property
    def attachment_section(self) -> Optional[Section]:
        if self._section is None and self._section_id is not None:
            self._section = section_service.get_section(self.db, self._section_id)
        if self._section is not None:
            return self._section
        attachment = self.record.attachment
        return attachment.section if attachment else None

    @attachment_section.setter
    def attachment_section(self, section: Optional[Section]) -> None:
        self._section = section
        self._section_id = section.section_id if section is not None else None

    @property
    def attachment_file(self) -> Optional[UploadedFileLike]:
        return self._file

    @attachment_file.setter
    def attachment_file(self, upload: Optional[UploadedFileLike]) -> None:
        self._file = upload

    @property
    def attachment_file_path(self) -> Optional[str]:
        if self._file_path is not None:
            return self._file_path
        attachment = self.record.attachment
        return attachment.file_path if attachment else None

    @attachment_file_path.setter
    def attachment_file_path(self, value: Optional[str]) -> None:
        self._file_path = value

    @property
    def attachment(self) -> Optional[Attachment]:
        return self.record.attachment

    def has_pending_changes(self) -> bool:
        return any(v is not None for v in (self._section_id, self._section, self._file, self._file_path))

    # -- save orchestration ----------------------------------------------------

    def assign_attributes(self, **attrs) -> "AttachmentBinding":
        for key, value in attrs.items():
            if key in ATTACHMENT_ATTRIBUTES:
                setattr(self, key, value)
            elif hasattr(type(self.record), key):
                setattr(self.record, key, value)
            else:
                raise AttributeError(f"{type(self.record).__name__} has no attribute {key!r}")
        return self

    def validate(self) -> None:
        if self.record.attachment is not None or not self.has_pending_changes():
            return
        # 새 첨부파일은 섹션과 파일이 모두 있어야 만들 수 있다.
        if self.attachment_section is None or self._file is None:
            raise MissingSectionOrFile()

    def save(self) -> HasAttachment:
        written: List[str] = []
        was_persistent = sa_inspect(self.record).has_identity
        previous = {field: getattr(self.record, field, None) for field in RESTORED_ON_REJECT}
        try:
            self.validate()
            self._apply_attachment(written)
            self.db.add(self.record)
            self.db.flush()
            if self.versioned:
                record_version_service.create_record_version(self.db, self.record)
            self.db.commit()
        except Exception:
            self.db.rollback()
            attachment_service.discard_written_files(written)
            if not was_persistent:
                self._restore_transient(previous)
            logger.info("[binding] save rejected for %s", type(self.record).__name__)
            raise

        self.db.refresh(self.record)
        self._clear_pending()
        return self.record

    def update(self, **attrs) -> HasAttachment:
        self.assign_attributes(**attrs)
        return self.save()

    def _apply_attachment(self, written: List[str]) -> None:
        attachment = self.record.attachment
        section = self.attachment_section if (self._section_id is not None or self._section is not None) else None

        if attachment is None:
            if not self.has_pending_changes():
                return
            attachment = attachment_service.create_attachment(
                self.db,
                section=section,
                path=self._file_path,
                upload=self._file,
            )
            written.append(attachment.file_location)
            self.record.attachment = attachment
        else:
            previous_location = attachment.file_location
            attachment_service.update_attachment(
                self.db,
                attachment,
                path=self._file_path,
                upload=self._file,
                section=section,
            )
            if attachment.file_location != previous_location:
                written.append(attachment.file_location)

        self.record.attachment_id = attachment.attachment_id
        self.record.attachment_version = attachment.version

    def _restore_transient(self, previous: Dict[str, Any]) -> None:
        # rollback 은 저장된 적 없는 레코드를 세션에서 빼기만 하므로
        # 이번 저장에서 채운 첨부파일 포인터와 id 는 직접 되돌린다.
        self.record.attachment = None
        for field, value in previous.items():
            if hasattr(type(self.record), field):
                setattr(self.record, field, value)

    def _clear_pending(self) -> None:
        self._section_id = None
        self._section = None
        self._file = None
        self._file_path = None


def to_response(binding: AttachmentBinding) -> Dict[str, Any]:
    record = binding.record
    data = {
        "id": record.id,
        "name": record.name,
        "attachment_id": record.attachment_id,
        "attachment_version": record.attachment_version,
        "attachment_file_path": binding.attachment_file_path,
        "attachment_section_id": binding.attachment_section_id,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }
    if binding.versioned:
        data["version"] = record.version
    return data
