"""콘텐츠 레코드 버전 저장/조회/복원 공용 기능을 제공하는 도메인 서비스입니다."""

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import func
from sqlalchemy.orm import Session

from content_attachments.exceptions import InvalidVersion
from content_attachments.models.attachable import CONTENT_FIELDS, VersionedAttachable, VersionedAttachableVersion
from content_attachments.services import attachment_service

logger = logging.getLogger(__name__)

# 버전 관리 대상 모델 -> (버전 모델, 버전 모델의 원본 FK 컬럼명)
VERSION_MODELS: Dict[Type[Any], Tuple[Type[Any], str]] = {
    VersionedAttachable: (VersionedAttachableVersion, "versioned_attachable_id"),
}


def is_versioned(model_cls: Type[Any]) -> bool:
    return model_cls in VERSION_MODELS


def _version_model(record) -> Tuple[Type[Any], str]:
    try:
        return VERSION_MODELS[type(record)]
    except KeyError:
        raise TypeError(f"{type(record).__name__} is not a versioned content type") from None


def create_record_version(db: Session, record, comment: Optional[str] = None):
    version_model, record_fk = _version_model(record)
    current_max = (
        db.query(func.max(version_model.version))
        .filter(getattr(version_model, record_fk) == record.id)
        .scalar()
    )
    version_no = (current_max or 0) + 1

    row = version_model(
        version=version_no,
        version_comment=comment,
        **{record_fk: record.id},
        **{field: getattr(record, field) for field in CONTENT_FIELDS},
    )
    record.version = version_no
    db.add(row)
    db.flush()
    logger.info(
        "[record-version] %s id=%s version=%s attachment_version=%s",
        type(record).__name__,
        record.id,
        version_no,
        row.attachment_version,
    )
    return row


def list_record_versions(db: Session, record) -> List[Any]:
    version_model, record_fk = _version_model(record)
    return (
        db.query(version_model)
        .filter(getattr(version_model, record_fk) == record.id)
        .order_by(version_model.version.desc())
        .all()
    )


def as_of_version(db: Session, record, version: int):
    """``version`` 시점의 레코드 스냅샷. ``snapshot.attachment`` 는 그 시점의 첨부파일 버전이다."""
    version_model, record_fk = _version_model(record)
    row = (
        db.query(version_model)
        .filter(
            getattr(version_model, record_fk) == record.id,
            version_model.version == version,
        )
        .first()
    )
    if not row:
        raise InvalidVersion(version)
    return row


def revert_to(db: Session, record, version: int):
    snapshot = as_of_version(db, record, version)

    try:
        for field in CONTENT_FIELDS:
            if field.startswith("attachment_"):
                continue
            setattr(record, field, getattr(snapshot, field))

        if snapshot.attachment_id is None:
            record.attachment_id = None
            record.attachment_version = None
        else:
            # 첨부파일도 스냅샷 시점으로 되돌리되, 기존 버전 이력은 새 버전으로 이어 붙인다.
            attachment = attachment_service.get_attachment(db, snapshot.attachment_id)
            attachment_service.revert_attachment(db, attachment, snapshot.attachment_version)
            record.attachment = attachment
            record.attachment_id = attachment.attachment_id
            record.attachment_version = attachment.version

        db.flush()
        create_record_version(db, record, comment=f"Reverted to version {version}")
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(record)
    return record
