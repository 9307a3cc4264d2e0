"""
pipeline.py - 문서 처리 파이프라인
====================================
파일 읽기부터 메모리 인덱스 저장까지의 전체 흐름을 관리합니다.
CLI(main.py)에서 진행 상황을 보여줄 수 있도록 콜백 방식으로 설계되었습니다.

[처리 흐름]
  파일 읽기 → 텍스트 추출 → 청크 분할 → 임베딩 생성 → 인덱스 저장

여러 파일을 한 번에 처리할 때(ingest_files):
- 텍스트 추출과 청크 분할은 스레드 풀에서 동시에 실행합니다
- 임베딩과 인덱스 저장은 입력 순서대로 실행합니다
- 읽을 수 없는 파일(ExtractionError)은 건너뛰고 나머지를 계속 처리합니다
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Callable

from loguru import logger

from config import Config
from processors import SUPPORTED_EXTENSIONS, process_file
from processors.pdf_processor import page_for_offset
from rag.chunker import Fragment, WordChunker
from rag.embedder import Embedder
from rag.errors import ExtractionError, RAGError
from rag.vector_index import VectorIndex

ProgressCallback = Callable[[int, str], None]


@dataclass
class IngestReport:
    """여러 파일 처리 결과"""

    documents: list[dict] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return sum(d["chunk_count"] for d in self.documents)


def find_documents(directory: str) -> list[str]:
    """폴더 안의 지원 형식 파일 경로를 이름순으로 반환합니다."""
    if not os.path.isdir(directory):
        return []
    return sorted(
        os.path.join(directory, name)
        for name in os.listdir(directory)
        if os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS
        and os.path.isfile(os.path.join(directory, name))
    )


def expand_paths(paths: list[str]) -> list[str]:
    """폴더 경로는 그 안의 문서 목록으로 펼칩니다."""
    expanded: list[str] = []
    for path in paths:
        if os.path.isdir(path):
            expanded.extend(find_documents(path))
        else:
            expanded.append(path)
    return expanded


def source_ids_for(file_paths: list[str]) -> list[str]:
    """
    배치 안에서 겹치지 않는 출처 ID를 만듭니다.

    모든 파일의 공통 상위 폴더를 기준으로 한 상대 경로를 사용합니다.
    예: ["docs/a/01.txt", "docs/b/01.txt"] → ["a/01.txt", "b/01.txt"]
        ["docs/01.pdf"] → ["01.pdf"]
    """
    abs_paths = [os.path.abspath(p) for p in file_paths]
    if not abs_paths:
        return []
    try:
        root = os.path.commonpath([os.path.dirname(p) for p in abs_paths])
    except ValueError:
        # 공통 상위 폴더가 없으면 (예: 서로 다른 드라이브) 절대 경로 사용
        return [p.replace(os.sep, "/") for p in abs_paths]
    return [os.path.relpath(p, root).replace(os.sep, "/") for p in abs_paths]


def extract_and_chunk(
    file_path: str,
    chunker: WordChunker,
    source_id: str | None = None,
) -> tuple[dict, list[Fragment]]:
    """
    파일에서 텍스트를 추출하고 청크로 나눕니다.
    PDF는 각 조각이 시작하는 페이지 번호를 함께 기록합니다.

    Args:
        source_id: 조각 ID 앞에 붙일 출처 이름. None이면 파일 이름

    Raises:
        ExtractionError: 파일을 읽을 수 없거나 추출된 텍스트가 없을 때
    """
    result = process_file(file_path)
    full_text = result.get("full_text", "")

    if not full_text.strip():
        raise ExtractionError(file_path, "파일에서 텍스트를 추출할 수 없습니다")

    source_id = source_id or result["filename"]
    fragments = chunker.split_text(full_text, source_id=source_id)

    pages = result.get("pages")
    if pages:
        fragments = [
            replace(f, page_number=page_for_offset(pages, f.source_offset))
            for f in fragments
        ]

    result["source_id"] = source_id
    return result, fragments


def _store(
    result: dict,
    fragments: list[Fragment],
    index: VectorIndex,
    embedder: Embedder,
) -> dict:
    embeddings = embedder.embed_texts([f.content for f in fragments])
    index.insert_many(zip(fragments, embeddings))

    return {
        "source_id": result["source_id"],
        "filename": result["filename"],
        "file_type": result["file_type"],
        "chunk_count": len(fragments),
        "text_length": len(result["full_text"]),
        "page_count": result.get("page_count", 1),
    }


def ingest_file(
    file_path: str,
    index: VectorIndex,
    embedder: Embedder,
    chunker: WordChunker | None = None,
    on_progress: ProgressCallback | None = None,
    source_id: str | None = None,
) -> dict:
    """
    파일 하나를 처리하고 인덱스에 저장하는 전체 파이프라인을 실행합니다.

    Args:
        file_path: 처리할 파일 경로
        index: 조각을 저장할 벡터 인덱스
        embedder: 임베딩 생성기
        chunker: 청크 분할기. None이면 config의 CHUNK_SIZE로 생성
        on_progress: 진행률 콜백 함수 (percent: 0~100, message: 상태 메시지)
        source_id: 조각 ID에 쓸 출처 이름. None이면 파일 이름

    Returns:
        처리 결과 딕셔너리

    Raises:
        ExtractionError: 텍스트를 추출할 수 없을 때
        EmbeddingError: 임베딩 API 호출이 실패했을 때
        DuplicateIdError: 같은 출처 ID가 이미 인덱스에 있을 때
    """
    chunker = chunker or WordChunker()

    def report(percent: int, message: str):
        if on_progress:
            on_progress(percent, message)

    # --- 1단계: 텍스트 추출 + 청크 분할 ---
    report(5, "📄 파일에서 텍스트를 추출하는 중...")
    result, fragments = extract_and_chunk(file_path, chunker, source_id)
    report(
        50,
        f"✅ 텍스트 {len(result['full_text']):,}자 → {len(fragments)}개의 청크로 분할 완료",
    )

    # --- 2단계: 임베딩 생성 + 인덱스 저장 ---
    report(55, f"🧠 {len(fragments)}개 청크의 임베딩 벡터를 생성하는 중...")
    summary = _store(result, fragments, index, embedder)
    report(100, "✅ 인덱스 저장 완료!")

    logger.info(f"수집 완료: {summary['source_id']} ({summary['chunk_count']}개 청크)")
    return summary


def ingest_files(
    file_paths: list[str],
    index: VectorIndex,
    embedder: Embedder,
    chunker: WordChunker | None = None,
    max_workers: int | None = None,
    on_progress: ProgressCallback | None = None,
) -> IngestReport:
    """
    여러 파일을 처리합니다. 읽을 수 없는 파일은 건너뜁니다.

    출처 ID는 source_ids_for()로 만들므로, 다른 폴더에 있는 같은 이름의
    파일도 서로 다른 조각 ID를 갖습니다.
    on_progress는 파일 하나가 끝날 때마다 (전체 대비 %, 메시지)로 호출됩니다.

    Raises:
        EmbeddingError, DuplicateIdError 등 추출 이외의 RAGError는 그대로
        전달됩니다. 이때 앞서 저장된 문서는 인덱스에 남아 있고, 그때까지의
        IngestReport가 예외의 `partial_report` 속성에 붙습니다.
    """
    chunker = chunker or WordChunker()
    max_workers = max_workers or Config.INGEST_WORKERS
    report = IngestReport()
    total = len(file_paths)

    if not file_paths:
        return report

    source_ids = source_ids_for(file_paths)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(extract_and_chunk, path, chunker, source_id)
            for path, source_id in zip(file_paths, source_ids)
        ]

        for done, (path, future) in enumerate(zip(file_paths, futures), 1):
            try:
                result, fragments = future.result()
            except ExtractionError as e:
                logger.warning(f"파일 건너뜀: {path} - {e.reason}")
                report.skipped.append((path, e.reason))
                if on_progress:
                    on_progress(done * 100 // total, f"⚠️ 건너뜀: {path}")
                continue

            try:
                summary = _store(result, fragments, index, embedder)
            except RAGError as e:
                e.partial_report = report
                raise

            report.documents.append(summary)
            logger.info(
                f"수집 완료: {summary['source_id']} ({summary['chunk_count']}개 청크)"
            )
            if on_progress:
                on_progress(
                    done * 100 // total,
                    f"✅ {summary['source_id']} — {summary['chunk_count']}개 청크",
                )

    return report
