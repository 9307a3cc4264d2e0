"""
vector_index.py - 메모리 벡터 인덱스
======================================
조각(Fragment)과 임베딩 벡터를 메모리에 보관하고,
질문 벡터와 가장 비슷한 조각 top-k 개를 찾아줍니다.

[초보자 안내]
코사인 유사도(cosine similarity):
- 두 벡터가 같은 방향을 가리키는 정도 (-1 ~ 1)
- 1에 가까울수록 의미가 비슷
- 계산식: dot(a, b) / (|a| * |b|)
- 영벡터(모든 값이 0)는 방향이 없으므로 유사도를 0으로 정의합니다

검색 방식:
- 저장된 모든 벡터와 하나씩 비교하는 선형 탐색입니다
- 문서 몇 개 분량(수천 조각)이면 충분히 빠릅니다
- 점수가 같으면 먼저 넣은 조각이 앞에 옵니다 (같은 질문 → 항상 같은 결과)

여러 스레드에서 동시에 insert / query 해도 안전합니다.
"""

import math
import threading
from typing import Iterable, NamedTuple, Sequence

from loguru import logger

from rag.chunker import Fragment
from rag.errors import DimensionMismatchError, DuplicateIdError, InvalidArgumentError


class SearchResult(NamedTuple):
    """검색 결과 하나 (조각 + 유사도 점수)"""

    fragment: Fragment
    score: float


class _Entry(NamedTuple):
    fragment: Fragment
    vector: tuple[float, ...]
    order: int


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """코사인 유사도. 둘 중 하나가 영벡터면 0.0"""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(x * x for x in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class VectorIndex:
    """
    조각 ID → (조각, 벡터) 를 보관하는 메모리 인덱스

    사용 예시:
        index = VectorIndex()
        index.insert(fragment, [0.1, 0.2, ...])
        for result in index.query(question_vector, k=4):
            print(result.fragment.content, result.score)
    """

    def __init__(self):
        self._entries: dict[str, _Entry] = {}
        self._dimension: int | None = None
        self._counter = 0
        self._lock = threading.Lock()

    @property
    def dimension(self) -> int | None:
        """첫 번째 insert로 정해진 벡터 차원 (비어 있으면 None)"""
        return self._dimension

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fragment_id: str) -> bool:
        return fragment_id in self._entries

    def get(self, fragment_id: str) -> Fragment | None:
        entry = self._entries.get(fragment_id)
        return entry.fragment if entry else None

    def insert(self, fragment: Fragment, vector: Sequence[float]) -> None:
        """
        조각과 벡터를 인덱스에 추가합니다.

        Raises:
            DimensionMismatchError: 벡터 차원이 인덱스 차원과 다를 때
            DuplicateIdError: 같은 ID의 조각이 이미 있을 때 (덮어쓰지 않음)
        """
        values = tuple(float(x) for x in vector)

        with self._lock:
            expected = self._dimension
            if not values or (expected is not None and len(values) != expected):
                raise DimensionMismatchError(expected, len(values), fragment.id)
            if fragment.id in self._entries:
                raise DuplicateIdError(fragment.id)

            self._entries[fragment.id] = _Entry(fragment, values, self._counter)
            self._counter += 1
            if expected is None:
                self._dimension = len(values)

        logger.debug(f"인덱스에 추가: {fragment.id} (dim={len(values)})")

    def insert_many(
        self, items: Iterable[tuple[Fragment, Sequence[float]]]
    ) -> int:
        """여러 (조각, 벡터) 쌍을 순서대로 추가합니다. 첫 오류에서 멈춥니다."""
        count = 0
        for fragment, vector in items:
            self.insert(fragment, vector)
            count += 1
        return count

    def query(self, vector: Sequence[float], k: int) -> list[SearchResult]:
        """
        질문 벡터와 가장 비슷한 조각을 최대 k개 반환합니다.

        Returns:
            점수 내림차순 SearchResult 리스트 (동점이면 먼저 넣은 순서)

        Raises:
            InvalidArgumentError: k <= 0
            DimensionMismatchError: 벡터 차원이 인덱스 차원과 다를 때
        """
        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise InvalidArgumentError("k", k)

        values = tuple(float(x) for x in vector)

        # 잠금 안에서는 스냅샷만 만들고, 유사도 계산은 잠금 밖에서 합니다
        with self._lock:
            dimension = self._dimension
            entries = list(self._entries.values())

        if not entries:
            return []
        if len(values) != dimension:
            raise DimensionMismatchError(dimension, len(values))

        scored = [
            (cosine_similarity(values, entry.vector), entry.order, entry.fragment)
            for entry in entries
        ]
        scored.sort(key=lambda item: (-item[0], item[1]))

        return [SearchResult(fragment, score) for score, _, fragment in scored[:k]]

    def clear(self) -> None:
        """인덱스를 비웁니다. 차원도 초기화됩니다."""
        with self._lock:
            self._entries.clear()
            self._dimension = None
            self._counter = 0
