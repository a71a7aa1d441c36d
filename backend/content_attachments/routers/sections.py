"""Sections 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from content_attachments.database import get_db
from content_attachments.schemas.section import SectionCreate, SectionOut
from content_attachments.services import section_service

router = APIRouter(prefix="/api/sections", tags=["sections"])


@router.get("", response_model=List[SectionOut])
def list_sections(db: Session = Depends(get_db)):
    return section_service.list_sections(db)


@router.post("", response_model=SectionOut)
def create_section(data: SectionCreate, db: Session = Depends(get_db)):
    return section_service.create_section(db, name=data.name, parent_id=data.parent_id)


@router.get("/{section_id}", response_model=SectionOut)
def get_section(section_id: int, db: Session = Depends(get_db)):
    return section_service.get_section(db, section_id)
