"""
retriever.py - 문서 검색기
============================
사용자의 질문과 가장 관련 있는 문서 조각을 찾아주는 모듈입니다.

[초보자 안내]
검색(Retrieval) 과정:
1. 사용자가 질문을 입력합니다
2. 질문을 임베딩 벡터로 변환합니다
3. 인덱스에 저장된 모든 조각의 벡터와 코사인 유사도를 비교합니다
4. 유사도가 높은 상위 N개의 조각을 반환합니다
"""

from config import Config
from rag.embedder import Embedder
from rag.vector_index import SearchResult, VectorIndex

NO_RESULTS_MESSAGE = "관련 문서를 찾을 수 없습니다."


class Retriever:
    """
    질문과 관련된 문서 조각을 검색하는 클래스

    사용 예시:
        retriever = Retriever(index, embedder)
        for r in retriever.search("2024년 매출은?"):
            print(r.fragment.content, r.score)
    """

    def __init__(self, index: VectorIndex, embedder: Embedder):
        self.index = index
        self.embedder = embedder

    def search(
        self,
        query: str,
        top_k: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """
        질문과 유사한 문서 조각을 검색합니다.

        Args:
            query: 사용자 질문
            top_k: 반환할 최대 결과 수. None이면 config의 TOP_K
            threshold: 최소 유사도. None이면 거르지 않음

        Returns:
            유사도 내림차순 SearchResult 리스트
        """
        top_k = Config.TOP_K if top_k is None else top_k
        query_embedding = self.embedder.embed_text(query)
        results = self.index.query(query_embedding, top_k)

        if threshold is not None:
            results = [r for r in results if r.score >= threshold]
        return results

    def search_with_context(
        self,
        query: str,
        top_k: int | None = None,
        threshold: float | None = None,
    ) -> str:
        """
        검색 결과를 AI 모델에 전달하기 좋은 형태의 텍스트로 변환합니다.

        Returns:
            컨텍스트 문자열 (AI 프롬프트에 삽입할 용도)
        """
        return format_context(self.search(query, top_k, threshold))


def format_context(results: list[SearchResult]) -> str:
    """검색 결과를 번호가 붙은 참고자료 블록으로 만듭니다."""
    if not results:
        return NO_RESULTS_MESSAGE

    context_parts = []
    for i, result in enumerate(results, 1):
        similarity_pct = round(result.score * 100, 1)
        fragment = result.fragment
        source_info = f"출처: {fragment.source_id}"
        if fragment.page_number is not None:
            source_info += f", {fragment.page_number}페이지"
        context_parts.append(
            f"[참고자료 {i}] ({source_info}, 조각 {fragment.id}) "
            f"(유사도: {similarity_pct}%)\n"
            f"{fragment.content}"
        )

    return "\n\n---\n\n".join(context_parts)
