"""첨부파일/버전 도메인에서 발생하는 예외 정의입니다.

서비스 레이어는 라우터와 마찬가지로 HTTPException 계열을 던지므로
별도 변환 없이 FastAPI 응답 코드로 이어집니다.
"""

from fastapi import HTTPException


class MissingSectionOrFile(HTTPException):
    def __init__(self, detail: str = "첨부 섹션과 파일은 함께 지정해야 합니다."):
        super().__init__(status_code=400, detail=detail)


class InvalidVersion(HTTPException):
    def __init__(self, version: int | None = None):
        detail = "버전 이력을 찾을 수 없습니다."
        if version is not None:
            detail = f"버전 {version} 이력을 찾을 수 없습니다."
        super().__init__(status_code=404, detail=detail)
        self.version = version


class SectionNotFound(HTTPException):
    def __init__(self, section_id: int | None = None):
        super().__init__(status_code=404, detail="섹션을 찾을 수 없습니다.")
        self.section_id = section_id


class RecordNotFound(HTTPException):
    def __init__(self, detail: str = "콘텐츠를 찾을 수 없습니다."):
        super().__init__(status_code=404, detail=detail)


class AttachmentTooLarge(HTTPException):
    def __init__(self, limit: int):
        if limit >= 1024 * 1024:
            detail = f"File exceeds {limit // (1024 * 1024)} MB limit"
        else:
            detail = f"File exceeds {limit} byte limit"
        super().__init__(status_code=400, detail=detail)
        self.limit = limit
