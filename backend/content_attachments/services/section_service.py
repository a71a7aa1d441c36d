"""Section 도메인 서비스 레이어입니다."""

from typing import List, Optional

from sqlalchemy.orm import Session

from content_attachments.exceptions import SectionNotFound
from content_attachments.models.section import Section
from content_attachments.utils.file_path import sanitize_file_path


def get_section(db: Session, section_id: int) -> Section:
    section = db.query(Section).filter(Section.section_id == section_id).first()
    if not section:
        raise SectionNotFound(section_id)
    return section


def list_sections(db: Session) -> List[Section]:
    return db.query(Section).order_by(Section.path.asc()).all()


def create_section(db: Session, *, name: str, parent_id: Optional[int] = None) -> Section:
    parent = get_section(db, parent_id) if parent_id is not None else None
    base = parent.path.rstrip("/") if parent else ""
    section = Section(name=name, parent_id=parent_id, path=f"{base}/{sanitize_file_path(name)}")
    db.add(section)
    db.commit()
    db.refresh(section)
    return section
