"""
rag 패키지
===========
RAG(Retrieval-Augmented Generation) 파이프라인의 핵심 모듈들을 제공합니다.

[초보자 안내]
RAG란?
- Retrieval: 질문과 관련된 문서 조각을 '검색'하고
- Augmented: 그 조각들을 AI 모델의 입력에 '추가'하여
- Generation: 정확한 답변을 '생성'하는 기술

RAG 파이프라인 3단계:
1. 청킹(Chunking): 긴 문서를 적절한 크기로 나누기
2. 임베딩(Embedding): 텍스트를 숫자 벡터로 변환하기
3. 검색(Retrieval): 메모리 인덱스에서 질문과 유사한 문서 조각 찾기
"""

from rag.chunker import Fragment, WordChunker, chunk_text
from rag.embedder import Embedder
from rag.errors import (
    DimensionMismatchError,
    DuplicateIdError,
    EmbeddingError,
    ExtractionError,
    GenerationError,
    InvalidArgumentError,
    InvalidConfigError,
    RAGError,
)
from rag.retriever import Retriever
from rag.vector_index import SearchResult, VectorIndex, cosine_similarity

__all__ = [
    "Fragment",
    "WordChunker",
    "chunk_text",
    "Embedder",
    "Retriever",
    "SearchResult",
    "VectorIndex",
    "cosine_similarity",
    "RAGError",
    "InvalidConfigError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "DuplicateIdError",
    "ExtractionError",
    "EmbeddingError",
    "GenerationError",
]
