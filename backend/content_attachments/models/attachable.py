"""첨부파일을 가질 수 있는 콘텐츠 레코드 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from content_attachments.database import Base

# 레코드 버전 행으로 그대로 복사되는 콘텐츠 컬럼
CONTENT_FIELDS = ("name", "attachment_id", "attachment_version")


class AttachableContent:
    """콘텐츠 테이블과 그 버전 테이블이 함께 쓰는 컬럼 정의."""

    name = Column(String(200))
    attachment_version = Column(Integer, nullable=True)

    @declared_attr
    def attachment_id(cls):
        return Column(Integer, ForeignKey("attachments.attachment_id"), nullable=True)


class Attachable(AttachableContent, Base):
    __tablename__ = "attachables"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    attachment = relationship("Attachment")


class VersionedAttachable(AttachableContent, Base):
    __tablename__ = "versioned_attachables"

    id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    attachment = relationship("Attachment")
    versions = relationship(
        "VersionedAttachableVersion",
        back_populates="record",
        order_by="VersionedAttachableVersion.version",
    )


class VersionedAttachableVersion(AttachableContent, Base):
    __tablename__ = "versioned_attachable_versions"

    version_id = Column(Integer, primary_key=True, autoincrement=True)
    versioned_attachable_id = Column(Integer, ForeignKey("versioned_attachables.id"), nullable=False)
    version = Column(Integer, nullable=False)
    version_comment = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    record = relationship("VersionedAttachable", back_populates="versions")
    # 이 버전이 만들어질 때 가리키던 첨부파일 스냅샷
    attachment = relationship(
        "AttachmentVersion",
        primaryjoin=(
            "and_(foreign(VersionedAttachableVersion.attachment_id) == AttachmentVersion.attachment_id, "
            "foreign(VersionedAttachableVersion.attachment_version) == AttachmentVersion.version)"
        ),
        viewonly=True,
        uselist=False,
    )

    __table_args__ = (
        UniqueConstraint("versioned_attachable_id", "version", name="uq_versioned_attachable_version"),
        Index("idx_versioned_attachable_version", "versioned_attachable_id", "version"),
    )

    @property
    def attachment_file_path(self) -> str | None:
        return self.attachment.file_path if self.attachment else None
