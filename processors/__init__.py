"""
processors 패키지
==================
파일 형식(PDF, 텍스트)에서 텍스트를 추출하는 프로세서들을 제공합니다.

[초보자 안내]
- 프로세서(processor): 파일을 읽어서 텍스트로 변환하는 역할
- 각 파일 형식마다 별도의 프로세서가 필요합니다
"""

import os

from processors.pdf_processor import PDFProcessor
from processors.text_processor import TextProcessor
from rag.errors import ExtractionError

# 파일 확장자별 지원 형식
SUPPORTED_EXTENSIONS = {
    ".pdf": "pdf",
    ".txt": "text",
    ".md": "text",
}


def get_file_type(file_path: str) -> str | None:
    """파일 확장자로 파일 종류를 판별합니다."""
    ext = os.path.splitext(file_path)[1].lower()
    return SUPPORTED_EXTENSIONS.get(ext)


def process_file(file_path: str) -> dict:
    """파일을 읽어서 텍스트를 추출합니다."""
    file_type = get_file_type(file_path)

    if file_type == "pdf":
        processor = PDFProcessor()
    elif file_type == "text":
        processor = TextProcessor()
    else:
        ext = os.path.splitext(file_path)[1] or "(확장자 없음)"
        raise ExtractionError(
            file_path,
            f"지원하지 않는 파일 형식입니다: {ext} "
            f"(지원 형식: {', '.join(SUPPORTED_EXTENSIONS)})",
        )

    return processor.process(file_path)


__all__ = [
    "PDFProcessor",
    "TextProcessor",
    "SUPPORTED_EXTENSIONS",
    "get_file_type",
    "process_file",
]
