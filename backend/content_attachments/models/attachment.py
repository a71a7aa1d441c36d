"""첨부파일과 첨부파일 버전 스냅샷을 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from content_attachments.database import Base


class Attachment(Base):
    __tablename__ = "attachments"

    attachment_id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(Integer, nullable=False, default=1)
    file_path = Column(String(255), nullable=False)  # "/" + 정리된 파일명
    section_id = Column(Integer, ForeignKey("sections.section_id"), nullable=False)
    file_location = Column(String(255), nullable=False)  # 저장 루트 기준 상대 경로
    file_name = Column(String(255))  # 업로드 원본 파일명
    file_type = Column(String(100))
    file_extension = Column(String(20))
    file_size = Column(Integer, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    section = relationship("Section", back_populates="attachments")
    versions = relationship(
        "AttachmentVersion",
        back_populates="attachment",
        order_by="AttachmentVersion.version",
    )

    def __repr__(self) -> str:
        return f"<Attachment {self.attachment_id} v{self.version} {self.file_path!r}>"


class AttachmentVersion(Base):
    __tablename__ = "attachment_versions"

    attachment_version_id = Column(Integer, primary_key=True, autoincrement=True)
    attachment_id = Column(Integer, ForeignKey("attachments.attachment_id"), nullable=False)
    version = Column(Integer, nullable=False)
    file_path = Column(String(255), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.section_id"), nullable=False)
    file_location = Column(String(255), nullable=False)
    file_name = Column(String(255))
    file_type = Column(String(100))
    file_extension = Column(String(20))
    file_size = Column(Integer, default=0)
    created_at = Column(DateTime, server_default=func.now())

    attachment = relationship("Attachment", back_populates="versions")
    section = relationship("Section")

    __table_args__ = (
        UniqueConstraint("attachment_id", "version", name="uq_attachment_version"),
        Index("idx_attachment_version_attachment", "attachment_id", "version"),
    )

    def __repr__(self) -> str:
        return f"<AttachmentVersion {self.attachment_id} v{self.version} {self.file_path!r}>"
