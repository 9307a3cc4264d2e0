"""테스트 공용 fixture"""

from unittest.mock import MagicMock

import pytest

VOCABULARY = ["moore", "transistor", "chip", "entropy", "universe", "question"]


class FakeEmbedder:
    """단어 빈도로 벡터를 만드는 결정적인 가짜 임베더 (API 호출 없음)"""

    def __init__(self, vocabulary=None):
        self.vocabulary = vocabulary or VOCABULARY
        self.dimension = len(self.vocabulary)
        self.calls = []

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        words = [w.strip(".,?!").lower() for w in text.split()]
        return [float(words.count(v)) for v in self.vocabulary]

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) for t in texts]


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def openai_client():
    return MagicMock()
