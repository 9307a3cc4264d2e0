"""
pdf_processor.py - PDF 파일 처리기
====================================
PDF 파일에서 페이지별 텍스트를 추출합니다.

[초보자 안내]
- PyMuPDF(fitz): PDF 파일을 읽고 분석하는 Python 라이브러리
- 스캔한 이미지만 있는 PDF는 글자를 추출할 수 없습니다 (빈 텍스트)

[처리 흐름]
  PDF 파일 → 페이지별 텍스트 추출 → 빈 줄로 이어 붙이기
"""

import os
from bisect import bisect_right
from dataclasses import dataclass

import fitz  # PyMuPDF

from rag.errors import ExtractionError

PAGE_SEPARATOR = "\n\n"


@dataclass
class PageContent:
    """한 페이지에서 추출된 내용을 담는 데이터 클래스"""

    page_number: int
    text: str
    start_offset: int = 0


class PDFProcessor:
    """
    PDF 파일에서 텍스트를 추출하는 프로세서

    사용 예시:
        processor = PDFProcessor()
        result = processor.process("보고서.pdf")
        print(result["full_text"])
    """

    def process(self, file_path: str) -> dict:
        """
        PDF 파일을 처리하여 텍스트를 추출합니다.

        Returns:
            dict: {
                "filename": 파일 이름,
                "file_type": "pdf",
                "file_size": 파일 크기,
                "page_count": 페이지 수,
                "pages": [PageContent, ...],  # 텍스트가 있는 페이지만
                "full_text": 전체 텍스트,
            }

        Raises:
            ExtractionError: 파일이 없거나 손상되어 읽을 수 없을 때
        """
        if not os.path.exists(file_path):
            raise ExtractionError(file_path, "파일을 찾을 수 없습니다")

        try:
            with fitz.open(file_path) as doc:
                texts = [page.get_text("text").strip() for page in doc]
        except Exception as e:
            raise ExtractionError(file_path, f"PDF를 읽을 수 없습니다: {e}") from e

        # 빈 페이지는 건너뛰고, 각 페이지가 full_text 어디서 시작하는지 기록
        pages: list[PageContent] = []
        offset = 0
        for i, text in enumerate(texts):
            if not text:
                continue
            if pages:
                offset += len(PAGE_SEPARATOR)
            pages.append(PageContent(page_number=i + 1, text=text, start_offset=offset))
            offset += len(text)

        full_text = PAGE_SEPARATOR.join(p.text for p in pages)

        return {
            "filename": os.path.basename(file_path),
            "file_type": "pdf",
            "file_size": os.path.getsize(file_path),
            "page_count": len(texts),
            "pages": pages,
            "full_text": full_text,
        }


def page_for_offset(pages: list[PageContent], offset: int) -> int | None:
    """full_text 안의 위치(offset)가 속한 페이지 번호. 페이지 정보가 없으면 None"""
    starts = [p.start_offset for p in pages]
    position = bisect_right(starts, offset) - 1
    if position < 0:
        return None
    return pages[position].page_number
