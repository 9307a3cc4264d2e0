"""청크 분할기 테스트"""

import pytest

from rag.chunker import Fragment, WordChunker, chunk_text
from rag.errors import InvalidConfigError


class TestChunkText:
    def test_splits_on_word_boundaries(self):
        fragments = chunk_text("alpha beta gamma delta", 11)
        assert [f.content for f in fragments] == ["alpha beta", "gamma delta"]

    def test_empty_text(self):
        assert chunk_text("", 10) == []
        assert chunk_text("   \n\t  ", 10) == []

    @pytest.mark.parametrize("size", [0, -5])
    def test_non_positive_size_raises(self, size):
        with pytest.raises(InvalidConfigError) as exc_info:
            chunk_text("some text", size)
        assert exc_info.value.value == size

    def test_invalid_size_raises_even_for_empty_text(self):
        with pytest.raises(InvalidConfigError):
            chunk_text("", 0)

    def test_long_word_is_kept_whole(self):
        fragments = chunk_text("hi supercalifragilistic yo", 5)
        assert [f.content for f in fragments] == ["hi", "supercalifragilistic", "yo"]

    def test_ids_are_deterministic(self):
        text = "one two three four five six seven"
        first = chunk_text(text, 9, source_id="moores_law.pdf")
        second = chunk_text(text, 9, source_id="moores_law.pdf")

        assert first == second
        assert [f.id for f in first] == [
            f"moores_law.pdf#{i}" for i in range(len(first))
        ]
        assert len({f.id for f in first}) == len(first)

    def test_source_offsets_point_into_original(self):
        text = "  alpha beta\n\ngamma   delta"
        fragments = chunk_text(text, 11)

        assert [f.content for f in fragments] == ["alpha beta", "gamma delta"]
        assert fragments[0].source_offset == 2
        assert fragments[1].source_offset == text.index("gamma")

    def test_whitespace_is_normalised(self):
        text = "The  Last\tQuestion\nwas asked   for the first time"
        fragments = chunk_text(text, 20)
        assert " ".join(f.content for f in fragments) == " ".join(text.split())

    def test_no_chunk_exceeds_limit(self):
        words = ["a", "bb", "ccc", "dddd", "eeeeeeeeeeeeeeee", "ff", "g"] * 20
        text = " ".join(words)

        for size in (1, 3, 7, 10, 25):
            fragments = chunk_text(text, size)
            assert " ".join(f.content for f in fragments) == text
            for f in fragments:
                assert f.content
                assert f.content == f.content.strip()
                if len(f.content) > size:
                    # 한계보다 긴 것은 단어 하나짜리뿐
                    assert " " not in f.content

    def test_exact_fit(self):
        fragments = chunk_text("abc def", 7)
        assert [f.content for f in fragments] == ["abc def"]

    def test_fragment_is_immutable(self):
        fragment = chunk_text("hello", 10)[0]
        with pytest.raises(AttributeError):
            fragment.content = "changed"


class TestWordChunker:
    def test_uses_given_size(self):
        chunker = WordChunker(chunk_size=11)
        fragments = chunker.split_text("alpha beta gamma delta", source_id="doc")
        assert fragments == [
            Fragment(id="doc#0", content="alpha beta", source_offset=0, source_id="doc"),
            Fragment(id="doc#1", content="gamma delta", source_offset=11, source_id="doc"),
        ]

    def test_defaults_to_config(self, monkeypatch):
        from config import Config

        monkeypatch.setattr(Config, "CHUNK_SIZE", 123)
        assert WordChunker().chunk_size == 123

    def test_rejects_invalid_size(self):
        with pytest.raises(InvalidConfigError):
            WordChunker(chunk_size=0)
