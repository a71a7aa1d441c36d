"""첨부파일 경로(파일명) 정리 유틸리티."""

from __future__ import annotations

import re

from content_attachments.config import settings

_WHITESPACE_RE = re.compile(r"\s+")
_DASH_RE = re.compile(r"[&+()]")
_DISALLOWED_RE = re.compile(r"[^\w.\-]")
_ALNUM_RE = re.compile(r"[^\W_]")

# attachments.file_extension 컬럼 길이
MAX_EXTENSION_LENGTH = 20


def sanitize_file_path(file_path: str | None, fallback: str | None = None) -> str:
    """사용자가 입력한 파일명을 파일시스템/URL에 안전한 이름으로 바꾼다.

    공백 묶음은 ``_``, ``& + ( )`` 는 ``-`` 로 치환하고 글자, 숫자, ``_ . -``
    이외의 문자는 제거한다. 확장자 앞부분에 글자/숫자가 하나도 남지 않으면
    ``fallback`` (기본값 ``settings.ATTACHMENT_FALLBACK_NAME``) 으로 대체한다.
    전체 길이는 ``settings.ATTACHMENT_MAX_NAME_LENGTH`` 를 넘지 않는다.

    >>> sanitize_file_path("Draft #1.txt")
    'Draft_1.txt'
    """
    value = _WHITESPACE_RE.sub("_", str(file_path or ""))
    value = _DASH_RE.sub("-", value)
    value = _DISALLOWED_RE.sub("", value)

    stem, dot, ext = value.rpartition(".")
    if not dot or len(ext) > MAX_EXTENSION_LENGTH:
        stem, dot, ext = value, "", ""

    limit = settings.ATTACHMENT_MAX_NAME_LENGTH
    if len(value) > limit:
        # 확장자는 남기고 앞부분을 자른다.
        stem = stem[: max(limit - len(dot + ext), 0)]

    if not _ALNUM_RE.search(stem):
        stem = fallback or settings.ATTACHMENT_FALLBACK_NAME
    return stem + dot + ext


def to_visible_path(file_path: str | None) -> str:
    # 첨부파일에 저장되는 경로는 항상 "/"로 시작한다.
    return "/" + sanitize_file_path(file_path)


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    ext = filename.rsplit(".", 1)[-1].lower()
    return ext if len(ext) <= MAX_EXTENSION_LENGTH else ""
