"""RAG 챗봇 테스트 (OpenAI 채팅 API는 MagicMock으로 대체)"""

from types import SimpleNamespace

import pytest
from openai import OpenAIError

from chatbot.chat import ChatSession, RAGChatbot, build_messages
from rag.chunker import chunk_text
from rag.errors import GenerationError, InvalidArgumentError
from rag.retriever import Retriever
from rag.vector_index import VectorIndex


def completion(text):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
    )


def stream_events(parts):
    events = [
        SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=p))])
        for p in parts
    ]
    events.append(SimpleNamespace(choices=[]))
    return iter(events)


@pytest.fixture
def chatbot(fake_embedder, openai_client):
    index = VectorIndex()
    for fragment in chunk_text(
        "moore predicted the transistor count of a chip", 2000, source_id="moore.pdf"
    ):
        index.insert(fragment, fake_embedder.embed_text(fragment.content))
    retriever = Retriever(index, fake_embedder)
    return RAGChatbot(retriever, client=openai_client, model="test-chat", top_k=2)


class TestChatSession:
    def test_add_exchange(self):
        session = ChatSession()
        session.add_exchange("q", "a")
        assert session.messages == [
            {"role": "user", "content": "q"},
            {"role": "assistant", "content": "a"},
        ]

    def test_history_is_trimmed(self):
        session = ChatSession()
        for i in range(11):
            session.add_exchange(f"q{i}", f"a{i}")

        assert len(session.messages) == 10
        assert session.messages[0] == {"role": "user", "content": "q6"}
        assert session.messages[-1] == {"role": "assistant", "content": "a10"}

    def test_reset(self):
        session = ChatSession()
        session.add_exchange("q", "a")
        session.reset()
        assert session.messages == []


class TestBuildMessages:
    def test_order(self):
        history = [{"role": "user", "content": "old"}]
        messages = build_messages("new question", "CONTEXT", history)

        assert messages[0]["role"] == "system"
        assert "CONTEXT" in messages[0]["content"]
        assert messages[1:] == [
            {"role": "user", "content": "old"},
            {"role": "user", "content": "new question"},
        ]


class TestRAGChatbot:
    def test_ask_sends_context_and_records_history(self, chatbot, openai_client):
        openai_client.chat.completions.create.return_value = completion("answer")

        assert chatbot.ask("what did moore say?") == "answer"

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-chat"
        assert "moore.pdf#0" in kwargs["messages"][0]["content"]
        assert kwargs["messages"][-1] == {"role": "user", "content": "what did moore say?"}
        assert chatbot.conversation_history[-1] == {"role": "assistant", "content": "answer"}

    def test_history_included_in_next_question(self, chatbot, openai_client):
        openai_client.chat.completions.create.return_value = completion("first")
        chatbot.ask("q1")
        openai_client.chat.completions.create.return_value = completion("second")
        chatbot.ask("q2")

        messages = openai_client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["content"] for m in messages[1:]] == ["q1", "first", "q2"]

    def test_stream_answer(self, chatbot, openai_client):
        openai_client.chat.completions.create.return_value = stream_events(
            ["Hel", "lo", None]
        )

        parts = list(chatbot.stream_answer("moore?"))

        assert parts == ["Hel", "lo"]
        assert chatbot.conversation_history[-1]["content"] == "Hello"

    def test_ask_stream_prints(self, chatbot, openai_client, capsys):
        openai_client.chat.completions.create.return_value = stream_events(["a", "b"])

        assert chatbot.ask("chip?", stream=True) == "ab"
        assert capsys.readouterr().out == "ab\n"

    def test_api_error_becomes_generation_error(self, chatbot, openai_client):
        openai_client.chat.completions.create.side_effect = OpenAIError("bad key")

        with pytest.raises(GenerationError):
            chatbot.ask("moore?")
        assert chatbot.conversation_history == []

    def test_reset_history(self, chatbot, openai_client):
        openai_client.chat.completions.create.return_value = completion("x")
        chatbot.ask("q")
        chatbot.reset_history()
        assert chatbot.conversation_history == []

    def test_zero_top_k_is_rejected(self, fake_embedder, openai_client):
        retriever = Retriever(VectorIndex(), fake_embedder)
        chatbot = RAGChatbot(retriever, client=openai_client, model="m", top_k=0)

        assert chatbot.top_k == 0
        with pytest.raises(InvalidArgumentError):
            chatbot.ask("anything")
        openai_client.chat.completions.create.assert_not_called()

    def test_top_k_defaults_to_config(self, fake_embedder, openai_client, monkeypatch):
        from config import Config

        monkeypatch.setattr(Config, "TOP_K", 7)
        chatbot = RAGChatbot(
            Retriever(VectorIndex(), fake_embedder), client=openai_client, model="m"
        )
        assert chatbot.top_k == 7
