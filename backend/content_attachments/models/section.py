"""첨부파일 저장 네임스페이스로 쓰이는 섹션 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from content_attachments.database import Base


class Section(Base):
    __tablename__ = "sections"

    section_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    parent_id = Column(Integer, ForeignKey("sections.section_id"), nullable=True)
    path = Column(String(255), nullable=False, default="/")
    created_at = Column(DateTime, server_default=func.now())

    parent = relationship("Section", remote_side=[section_id])
    attachments = relationship("Attachment", back_populates="section")

    def __repr__(self) -> str:
        return f"<Section {self.section_id} {self.path!r}>"
