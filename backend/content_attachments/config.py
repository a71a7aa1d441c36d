"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./content_attachments.db"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # File upload
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50 MB
    UPLOAD_DIR: str = "uploads"
    # UPLOAD_DIR 하위에서 첨부파일 본문이 저장되는 디렉터리
    ATTACHMENT_STORAGE_DIR: str = "attachments"
    # 정리 후 글자/숫자가 하나도 남지 않은 파일명 대체값
    ATTACHMENT_FALLBACK_NAME: str = "untitled"
    # 정리된 파일명 최대 길이. file_path 컬럼(255)에 "/" 가 붙어 들어간다.
    ATTACHMENT_MAX_NAME_LENGTH: int = 200

    def attachment_storage_root(self) -> str:
        return str(Path(self.UPLOAD_DIR) / self.ATTACHMENT_STORAGE_DIR)

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
