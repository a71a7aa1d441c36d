"""서비스 레이어 패키지 초기화 모듈입니다."""

from content_attachments.services import (
    attachment_service,
    section_service,
    record_version_service,
    attachment_binding,
)
