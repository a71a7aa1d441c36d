"""FastAPI 애플리케이션 진입점. 미들웨어와 API 라우터를 등록합니다."""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from content_attachments.config import settings
from content_attachments.database import Base, engine
import content_attachments.models  # noqa: F401 - 모델 import로 metadata 등록
from content_attachments.routers import attachables, attachments, sections, versioned_attachables

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Content Attachments",
    description="콘텐츠 레코드에 버전 관리되는 첨부파일을 연결하는 서비스",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(sections.router)
app.include_router(attachables.router)
app.include_router(versioned_attachables.router)
app.include_router(attachments.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)
    os.makedirs(settings.attachment_storage_root(), exist_ok=True)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Content Attachments"}
