"""
errors.py - RAG 파이프라인 예외 정의
=====================================
모든 예외는 RAGError를 상속합니다.

- 입력값 검증 오류(InvalidConfigError 등)는 ValueError도 함께 상속하므로
  `except ValueError` 로도 잡을 수 있습니다.
- ExtractionError / EmbeddingError / GenerationError 는 외부 라이브러리·API의
  오류를 감싼 것이며, 원래 예외는 `__cause__` 에 남아 있습니다.
"""


class RAGError(Exception):
    """이 프로젝트에서 발생하는 모든 예외의 기본 클래스"""

    # 여러 파일 수집(ingest_files) 도중 중단되면 그때까지의 IngestReport
    partial_report = None


class InvalidConfigError(RAGError, ValueError):
    """설정값이 올바르지 않을 때 (예: 청크 크기 <= 0)"""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"잘못된 설정값입니다: {name}={value!r}")


class InvalidArgumentError(RAGError, ValueError):
    """함수 인자가 올바르지 않을 때 (예: k <= 0)"""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"잘못된 인자입니다: {name}={value!r}")


class DimensionMismatchError(RAGError, ValueError):
    """벡터 차원이 인덱스의 차원과 다를 때"""

    def __init__(self, expected: int | None, actual: int, fragment_id: str | None = None):
        self.expected = expected
        self.actual = actual
        self.fragment_id = fragment_id
        target = f" (조각 ID: {fragment_id})" if fragment_id else ""
        super().__init__(
            f"벡터 차원이 맞지 않습니다: 기대값 {expected}, 실제 {actual}{target}"
        )


class DuplicateIdError(RAGError, ValueError):
    """이미 인덱스에 있는 조각 ID를 다시 넣으려 할 때"""

    def __init__(self, fragment_id: str):
        self.fragment_id = fragment_id
        super().__init__(f"이미 등록된 조각 ID입니다: {fragment_id}")


class ExtractionError(RAGError):
    """파일에서 텍스트를 추출하지 못했을 때"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"텍스트 추출 실패 ({source}): {reason}")


class EmbeddingError(RAGError):
    """임베딩 API 호출이 실패했을 때 (인증, 요청 한도, 네트워크 등)"""


class GenerationError(RAGError):
    """답변 생성 API 호출이 실패했을 때"""
