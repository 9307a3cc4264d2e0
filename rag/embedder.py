"""
embedder.py - 텍스트 임베딩 생성기
=====================================
텍스트를 숫자 벡터(임베딩)로 변환합니다.

[초보자 안내]
임베딩(Embedding)이란?
- 텍스트의 '의미'를 숫자 배열로 표현한 것
- 예: "고양이" → [0.23, -0.45, 0.67, ...] (1536개의 숫자)
- 의미가 비슷한 텍스트는 비슷한 숫자 배열을 가짐

모델 선택:
- text-embedding-3-small: 빠르고 저렴, 대부분의 용도에 충분
- text-embedding-3-large: 더 정확하지만 비용이 높음

API 호출이 실패하면(키 오류, 요청 한도 초과, 네트워크 문제) EmbeddingError가
발생합니다. 재시도는 하지 않으므로 필요하면 호출하는 쪽에서 처리하세요.
"""

from loguru import logger
from openai import OpenAI, OpenAIError

from config import Config
from rag.errors import EmbeddingError


class Embedder:
    """
    OpenAI API를 사용하여 텍스트를 임베딩 벡터로 변환하는 클래스

    사용 예시:
        embedder = Embedder()
        vector = embedder.embed_text("안녕하세요")
        vectors = embedder.embed_texts(["텍스트1", "텍스트2"])
    """

    batch_size = 100

    def __init__(
        self,
        client: OpenAI | None = None,
        model: str | None = None,
        dimension: int | None = None,
    ):
        """
        Args:
            client: OpenAI 클라이언트 (테스트에서는 가짜 객체를 넣을 수 있음)
            model: 임베딩 모델 이름. None이면 config에서 가져옴
            dimension: 임베딩 차원. None이면 config에서 가져옴
        """
        self.client = client or OpenAI(api_key=Config.OPENAI_API_KEY)
        self.model = model or Config.EMBEDDING_MODEL
        self.dimension = dimension or Config.EMBEDDING_DIMENSION

    def _create(self, input_):
        try:
            return self.client.embeddings.create(
                input=input_,
                model=self.model,
                dimensions=self.dimension,
            )
        except OpenAIError as e:
            raise EmbeddingError(f"임베딩 생성 실패 ({self.model}): {e}") from e

    def embed_text(self, text: str) -> list[float]:
        """
        하나의 텍스트를 임베딩 벡터로 변환합니다.

        Returns:
            임베딩 벡터 (float 리스트, 길이 = dimension)
        """
        text = text.replace("\n", " ").strip()
        if not text:
            return [0.0] * self.dimension

        response = self._create(text)
        return response.data[0].embedding

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """
        여러 텍스트를 한 번에 임베딩 벡터로 변환합니다.

        입력 순서와 같은 순서로 결과를 돌려주며,
        빈 텍스트는 API를 호출하지 않고 영벡터로 채웁니다.
        """
        cleaned = [t.replace("\n", " ").strip() for t in texts]
        non_empty_indices = [i for i, t in enumerate(cleaned) if t]
        non_empty_texts = [cleaned[i] for i in non_empty_indices]

        all_embeddings: dict[int, list[float]] = {}

        for start in range(0, len(non_empty_texts), self.batch_size):
            batch_texts = non_empty_texts[start : start + self.batch_size]
            batch_indices = non_empty_indices[start : start + self.batch_size]

            response = self._create(batch_texts)
            logger.debug(f"임베딩 배치 완료: {len(batch_texts)}개")

            for j, emb_data in enumerate(response.data):
                all_embeddings[batch_indices[j]] = emb_data.embedding

        return [
            all_embeddings.get(i, [0.0] * self.dimension) for i in range(len(texts))
        ]
