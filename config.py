"""
config.py - 프로젝트 설정 관리
================================
설정값은 환경변수 또는 .env 파일에서 읽습니다.

[초보자 안내]
- 로컬에서는 .env 파일에 API 키를 적어두면 됩니다.
- 숫자 설정(청크 크기, top-k 등)을 잘못 적으면 기본값이 사용되고,
  `python main.py check` 에서 경고가 표시됩니다.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _get(key: str, default: str = "") -> str:
    """환경변수 / .env 파일에서 설정값을 찾습니다."""
    return os.getenv(key, default)


def _get_int(key: str, default: int) -> int:
    """정수 설정값을 읽습니다. 숫자가 아니면 기본값을 사용합니다."""
    raw = _get(key, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return default


class Config:
    """모든 설정값을 한 곳에서 관리하는 클래스"""

    # --- OpenAI 설정 ---
    OPENAI_API_KEY: str = _get("OPENAI_API_KEY")

    # --- 임베딩 설정 ---
    EMBEDDING_MODEL: str = _get("EMBEDDING_MODEL", "text-embedding-3-small")
    EMBEDDING_DIMENSION: int = _get_int("EMBEDDING_DIMENSION", 1536)

    # --- 챗봇 모델 ---
    CHAT_MODEL: str = _get("CHAT_MODEL", "gpt-4o-mini")

    # --- 청크 / 검색 설정 ---
    CHUNK_SIZE: int = _get_int("CHUNK_SIZE", 2000)
    TOP_K: int = _get_int("TOP_K", 4)

    # --- 문서 폴더 / 수집 ---
    DOCUMENTS_DIR: str = _get(
        "DOCUMENTS_DIR", os.path.join(os.getcwd(), "documents")
    )
    INGEST_WORKERS: int = _get_int("INGEST_WORKERS", 4)

    # --- 로그 ---
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> list[str]:
        """필수 설정값이 모두 올바른지 검증합니다."""
        cls.OPENAI_API_KEY = _get("OPENAI_API_KEY")

        errors = []
        if not cls.OPENAI_API_KEY or cls.OPENAI_API_KEY.startswith("sk-여기"):
            errors.append("OPENAI_API_KEY가 설정되지 않았습니다.")
        if cls.CHUNK_SIZE <= 0:
            errors.append(f"CHUNK_SIZE는 0보다 커야 합니다 (현재: {cls.CHUNK_SIZE}).")
        if cls.TOP_K <= 0:
            errors.append(f"TOP_K는 0보다 커야 합니다 (현재: {cls.TOP_K}).")
        if cls.EMBEDDING_DIMENSION <= 0:
            errors.append(
                f"EMBEDDING_DIMENSION은 0보다 커야 합니다 "
                f"(현재: {cls.EMBEDDING_DIMENSION})."
            )
        if cls.INGEST_WORKERS <= 0:
            errors.append(
                f"INGEST_WORKERS는 0보다 커야 합니다 (현재: {cls.INGEST_WORKERS})."
            )
        return errors
