"""
chunker.py - 문서 텍스트 분할기
=================================
긴 문서 텍스트를 RAG에 적합한 크기의 청크(조각)로 나눕니다.

[초보자 안내]
왜 문서를 나눠야 할까?
- AI 모델에 한 번에 보낼 수 있는 텍스트 양에 제한이 있습니다
- 작은 조각으로 나누면 질문과 관련된 부분만 정확히 찾을 수 있습니다

우리가 사용하는 방식: 단어 단위 고정 크기 분할
- 텍스트를 공백 기준으로 단어로 나눈 뒤
- 최대 글자 수(max_chunk_chars)를 넘지 않을 때까지 단어를 이어 붙입니다
- 다음 단어를 붙이면 최대 크기를 넘으면, 지금까지의 청크를 닫고 새 청크를 시작합니다
- 최대 크기보다 긴 단어 하나는 자르지 않고 혼자 하나의 청크가 됩니다

예시 (max_chunk_chars=11):
    "alpha beta gamma delta" → ["alpha beta", "gamma delta"]

청크 안의 공백은 모두 공백 한 칸으로 정리됩니다.
"""

import re
from dataclasses import dataclass

from loguru import logger

from config import Config
from rag.errors import InvalidConfigError

_WORD_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class Fragment:
    """하나의 청크(텍스트 조각)를 나타내는 불변 데이터 클래스"""

    id: str
    content: str
    source_offset: int
    source_id: str = "doc"
    page_number: int | None = None  # PDF일 때 조각이 시작하는 페이지

    def __repr__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"Fragment(id={self.id!r}, len={len(self.content)}, preview='{preview}')"


def make_fragment_id(source_id: str, index: int) -> str:
    """출처 ID와 순번으로 조각 ID를 만듭니다. 예: "report#3" """
    return f"{source_id}#{index}"


def chunk_text(
    text: str,
    max_chunk_chars: int,
    source_id: str = "doc",
) -> list[Fragment]:
    """
    텍스트를 단어 경계에서 max_chunk_chars 이하의 조각으로 나눕니다.

    Args:
        text: 분할할 텍스트 (빈 문자열이면 빈 리스트 반환)
        max_chunk_chars: 청크 최대 글자 수 (0보다 커야 함)
        source_id: 조각 ID 앞에 붙는 출처 이름 (보통 파일 이름)

    Returns:
        Fragment 리스트 (문서 안에서의 순서대로)

    Raises:
        InvalidConfigError: max_chunk_chars가 양의 정수가 아닐 때
    """
    if (
        isinstance(max_chunk_chars, bool)
        or not isinstance(max_chunk_chars, int)
        or max_chunk_chars <= 0
    ):
        raise InvalidConfigError("max_chunk_chars", max_chunk_chars)

    fragments: list[Fragment] = []
    words: list[str] = []
    length = 0
    start = 0

    def close():
        fragments.append(
            Fragment(
                id=make_fragment_id(source_id, len(fragments)),
                content=" ".join(words),
                source_offset=start,
                source_id=source_id,
            )
        )

    for match in _WORD_RE.finditer(text or ""):
        word = match.group()
        # 현재 청크에 붙였을 때의 길이 (단어 사이 공백 1칸 포함)
        needed = len(word) if not words else length + 1 + len(word)

        if words and needed > max_chunk_chars:
            close()
            words = []

        if not words:
            start = match.start()
            length = len(word)
        else:
            length = needed
        words.append(word)

    if words:
        close()

    logger.debug(
        f"청크 분할 완료: source={source_id}, {len(fragments)}개 "
        f"(최대 {max_chunk_chars}자)"
    )
    return fragments


class WordChunker:
    """
    문서 텍스트를 단어 단위 청크로 분할하는 클래스

    사용 예시:
        chunker = WordChunker(chunk_size=1000)
        fragments = chunker.split_text("아주 긴 문서 텍스트...", source_id="보고서")
    """

    def __init__(self, chunk_size: int | None = None):
        """
        Args:
            chunk_size: 청크 최대 크기 (글자 수). None이면 config에서 가져옴
        """
        self.chunk_size = Config.CHUNK_SIZE if chunk_size is None else chunk_size
        if (
            isinstance(self.chunk_size, bool)
            or not isinstance(self.chunk_size, int)
            or self.chunk_size <= 0
        ):
            raise InvalidConfigError("chunk_size", self.chunk_size)

    def split_text(self, text: str, source_id: str = "doc") -> list[Fragment]:
        """텍스트를 청크로 분할합니다."""
        return chunk_text(text, self.chunk_size, source_id=source_id)
