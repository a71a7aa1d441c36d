"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from content_attachments.models.section import Section
from content_attachments.models.attachment import Attachment, AttachmentVersion
from content_attachments.models.attachable import Attachable, VersionedAttachable, VersionedAttachableVersion

__all__ = [
    "Section",
    "Attachment", "AttachmentVersion",
    "Attachable", "VersionedAttachable", "VersionedAttachableVersion",
]
