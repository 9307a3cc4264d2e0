"""
text_processor.py - 텍스트 파일 처리기
========================================
.txt / .md 파일을 UTF-8로 읽어 PDF 처리기와 같은 형태로 돌려줍니다.
"""

import os

from rag.errors import ExtractionError


class TextProcessor:
    """일반 텍스트 파일 프로세서"""

    def process(self, file_path: str) -> dict:
        if not os.path.exists(file_path):
            raise ExtractionError(file_path, "파일을 찾을 수 없습니다")

        try:
            with open(file_path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(file_path, f"텍스트를 읽을 수 없습니다: {e}") from e

        return {
            "filename": os.path.basename(file_path),
            "file_type": "text",
            "file_size": os.path.getsize(file_path),
            "page_count": 1,
            "pages": [],
            "full_text": text,
        }
