"""CLI 대화 루프 테스트 (입력은 미리 정한 순서대로 흉내 냄)"""

import io
from types import SimpleNamespace

import pytest
from openai import OpenAIError
from rich.console import Console

import main
from chatbot.chat import RAGChatbot
from rag.chunker import chunk_text
from rag.vector_index import VectorIndex


def stream_events(parts):
    return iter(
        SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=p))])
        for p in parts
    )


@pytest.fixture
def console(monkeypatch):
    fake = Console(file=io.StringIO(), width=120, color_system=None)
    monkeypatch.setattr(main, "console", fake)
    return fake


@pytest.fixture
def chatbots(monkeypatch, fake_embedder, openai_client):
    """build_index / RAGChatbot 를 테스트용으로 바꾸고 만들어진 챗봇을 모읍니다."""
    index = VectorIndex()
    for fragment in chunk_text("moore chip transistor", 2000, source_id="moore.pdf"):
        index.insert(fragment, fake_embedder.embed_text(fragment.content))

    monkeypatch.setattr(main, "build_index", lambda paths: (index, fake_embedder))

    created = []

    def make_chatbot(retriever):
        bot = RAGChatbot(retriever, client=openai_client, model="test-chat")
        created.append(bot)
        return bot

    monkeypatch.setattr(main, "RAGChatbot", make_chatbot)
    return created


def script_input(monkeypatch, console, answers):
    """console.input 이 answers 를 차례로 돌려주게 합니다. 예외 객체면 raise."""
    remaining = list(answers)

    def fake_input(prompt=""):
        answer = remaining.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    monkeypatch.setattr(console, "input", fake_input)
    return remaining


class TestChatLoop:
    def test_blank_question_reset_error_and_exit(
        self, monkeypatch, console, chatbots, openai_client
    ):
        openai_client.chat.completions.create.side_effect = [
            stream_events(["moore ", "answer"]),
            OpenAIError("bad key"),
        ]
        remaining = script_input(
            monkeypatch,
            console,
            ["", "   ", "what did moore say?", "reset", "and the chip?", "exit"],
        )

        main.cmd_chat([])

        output = console.file.getvalue()
        chatbot = chatbots[0]
        assert remaining == []
        assert openai_client.chat.completions.create.call_count == 2
        assert "대화 기록이 초기화되었습니다" in output
        assert chatbot.conversation_history == []
        assert "bad key" in output
        assert "챗봇을 종료합니다" in output

    @pytest.mark.parametrize("command", ["quit", "exit", "q", "종료", "EXIT"])
    def test_exit_commands(self, monkeypatch, console, chatbots, openai_client, command):
        remaining = script_input(monkeypatch, console, [command, "never read"])

        main.cmd_chat([])

        assert remaining == ["never read"]
        openai_client.chat.completions.create.assert_not_called()

    @pytest.mark.parametrize("interrupt", [EOFError(), KeyboardInterrupt()])
    def test_eof_and_ctrl_c_end_loop(self, monkeypatch, console, chatbots, interrupt):
        remaining = script_input(monkeypatch, console, [interrupt, "never read"])

        main.cmd_chat([])

        assert remaining == ["never read"]
        assert "챗봇을 종료합니다" in console.file.getvalue()

    def test_no_index_skips_loop(self, monkeypatch, console):
        monkeypatch.setattr(main, "build_index", lambda paths: None)
        remaining = script_input(monkeypatch, console, ["never read"])

        main.cmd_chat([])

        assert remaining == ["never read"]
