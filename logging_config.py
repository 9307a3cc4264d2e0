"""
logging_config.py - 로그 설정
==============================
loguru 로거를 설정합니다.

- 화면 출력(답변, 표 등)은 rich 콘솔이 담당하고,
  처리 과정 기록(청크 수, 건너뛴 파일 등)은 loguru 로그로 남깁니다.
- 라이브러리 모듈은 `from loguru import logger` 로 바로 사용합니다.
"""

import sys

from loguru import logger

from config import Config


def setup_logger(level: str | None = None):
    """stderr 로 컬러 로그를 출력하도록 loguru를 설정합니다."""
    level = (level or Config.LOG_LEVEL).upper()

    # 기본 핸들러 제거 후 다시 등록
    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level>"
        ),
        level=level,
        colorize=True,
    )
    return logger
