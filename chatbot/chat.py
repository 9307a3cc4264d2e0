"""
chat.py - RAG 기반 챗봇
=========================
사용자의 질문에 대해 인덱스에 저장된 문서를 참고하여 답변하는 챗봇입니다.

[초보자 안내]
RAG 챗봇의 작동 방식:
1. 사용자가 질문을 입력합니다
2. 질문과 관련된 문서 조각을 인덱스에서 검색합니다 (Retriever)
3. 검색된 조각들을 AI 모델에게 "참고자료"로 전달합니다 (build_messages)
4. AI 모델이 참고자료를 바탕으로 답변을 생성합니다

대화 기록(ChatSession):
- 이전 질문과 답변을 순서대로 저장해서 다음 질문에 함께 보냅니다
- 기록이 20개를 넘으면 최근 10개만 남깁니다
"""

from dataclasses import dataclass, field

from loguru import logger
from openai import OpenAI, OpenAIError

from config import Config
from rag.errors import GenerationError
from rag.retriever import Retriever, format_context


SYSTEM_PROMPT = """당신은 제공된 문서를 바탕으로 질문에 답하는 AI 어시스턴트입니다.

## 규칙
1. 반드시 아래 제공된 참고자료만을 바탕으로 답변하세요.
2. 여러 참고자료가 서로 관련되어 있으면 내용을 종합해서 답변하세요.
3. 참고자료에 없는 내용은 "제공된 문서에서 해당 정보를 찾을 수 없습니다"라고 답하세요.
4. 답변할 때 어떤 참고자료를 근거로 했는지 출처를 명시하세요.
5. 질문과 같은 언어로 답변하세요.

## 참고자료
{context}
"""

MAX_HISTORY = 20
KEEP_HISTORY = 10


@dataclass
class ChatSession:
    """질문/답변 기록을 순서대로 보관하는 대화 세션"""

    messages: list[dict] = field(default_factory=list)

    def add_exchange(self, question: str, answer: str) -> None:
        self.messages.append({"role": "user", "content": question})
        self.messages.append({"role": "assistant", "content": answer})

        # 대화 기록이 너무 길어지면 오래된 것부터 제거
        if len(self.messages) > MAX_HISTORY:
            self.messages = self.messages[-KEEP_HISTORY:]

    def reset(self) -> None:
        self.messages.clear()


def build_messages(question: str, context: str, history: list[dict]) -> list[dict]:
    """시스템 프롬프트 + 대화 기록 + 새 질문으로 API 메시지 목록을 만듭니다."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(context=context)},
        *history,
        {"role": "user", "content": question},
    ]


class RAGChatbot:
    """
    RAG 기반 챗봇 클래스

    사용 예시:
        chatbot = RAGChatbot(Retriever(index, embedder))
        answer = chatbot.ask("무어의 법칙이란?")
        print(answer)
    """

    def __init__(
        self,
        retriever: Retriever,
        client: OpenAI | None = None,
        model: str | None = None,
        top_k: int | None = None,
        threshold: float | None = None,
    ):
        """
        Args:
            retriever: 문서 조각 검색기
            client: OpenAI 클라이언트 (None이면 config의 API 키로 생성)
            model: 챗봇 모델 이름 (None이면 config의 CHAT_MODEL)
            top_k: 검색할 최대 문서 조각 수 (None이면 config의 TOP_K)
            threshold: 최소 유사도 임계값
        """
        self.client = client or OpenAI(api_key=Config.OPENAI_API_KEY)
        self.retriever = retriever
        self.model = model or Config.CHAT_MODEL
        self.top_k = Config.TOP_K if top_k is None else top_k
        self.threshold = threshold
        self.session = ChatSession()

    @property
    def conversation_history(self) -> list[dict]:
        return self.session.messages

    def _prepare(self, question: str) -> list[dict]:
        results = self.retriever.search(
            question, top_k=self.top_k, threshold=self.threshold
        )
        logger.debug(
            f"검색 결과 {len(results)}개: {[r.fragment.id for r in results]}"
        )
        return build_messages(
            question, format_context(results), self.session.messages
        )

    def ask(self, question: str, stream: bool = False) -> str:
        """
        질문에 대해 답변합니다.

        Args:
            question: 사용자 질문
            stream: True면 스트리밍 응답 (터미널에서 실시간 출력)

        Returns:
            AI의 답변 텍스트
        """
        if stream:
            full_response = ""
            for chunk_text in self.stream_answer(question):
                print(chunk_text, end="", flush=True)
                full_response += chunk_text
            print()
            return full_response

        messages = self._prepare(question)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.3,
                max_tokens=2000,
            )
        except OpenAIError as e:
            raise GenerationError(f"답변 생성 실패 ({self.model}): {e}") from e

        answer = response.choices[0].message.content or ""
        self.session.add_exchange(question, answer)
        return answer

    def stream_answer(self, question: str):
        """
        스트리밍 제너레이터. yield로 한 조각씩 텍스트를 반환합니다.
        끝까지 소비되면 대화 기록에 추가됩니다.
        """
        messages = self._prepare(question)

        full_response = ""
        for chunk_text in self._stream_chunks(messages):
            full_response += chunk_text
            yield chunk_text

        self.session.add_exchange(question, full_response)

    def _stream_chunks(self, messages: list[dict]):
        """OpenAI 스트리밍 응답에서 텍스트 조각을 yield합니다."""
        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.3,
                max_tokens=2000,
                stream=True,
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta.content:
                    yield delta.content
        except OpenAIError as e:
            raise GenerationError(f"답변 생성 실패 ({self.model}): {e}") from e

    def reset_history(self):
        """대화 기록을 초기화합니다."""
        self.session.reset()
