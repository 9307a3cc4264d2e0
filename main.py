"""
main.py - PDF-RAG 프로젝트 메인 엔트리포인트
===============================================
터미널에서 실행하는 CLI(명령줄 인터페이스)를 제공합니다.

벡터는 메모리에만 저장되므로, 명령을 실행할 때마다 문서를 다시 읽어
인덱스를 만듭니다. 경로를 생략하면 documents/ 폴더의 파일을 사용합니다.

[사용법]
  # 설정 확인
  python main.py check

  # 문서 읽기 테스트 (추출 → 분할 → 임베딩 → 인덱스)
  python main.py ingest 파일1.pdf 파일2.pdf

  # 한 번만 검색해 보기
  python main.py search "무어의 법칙이란?" documents/

  # 챗봇 시작 (대화형)
  python main.py chat
  python main.py chat 보고서.pdf
"""

import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from chatbot.chat import RAGChatbot
from config import Config
from logging_config import setup_logger
from pipeline import expand_paths, ingest_files
from rag.embedder import Embedder
from rag.errors import RAGError
from rag.retriever import Retriever
from rag.vector_index import VectorIndex

console = Console()

EXIT_COMMANDS = ("quit", "exit", "종료", "q")
RESET_COMMANDS = ("reset", "초기화")


def print_banner():
    """프로그램 시작 배너를 출력합니다."""
    banner = """
╔══════════════════════════════════════════╗
║         📚 PDF-RAG 문서 챗봇 📚         ║
║                                          ║
║  문서를 불러오고 AI에게 질문하세요!      ║
║  PDF, TXT, MD 지원                       ║
╚══════════════════════════════════════════╝
    """
    console.print(banner, style="bold cyan")


def cmd_check():
    """설정이 올바른지 확인합니다."""
    console.print("\n[bold]🔍 설정 확인 중...[/bold]\n")

    errors = Config.validate()
    if errors:
        console.print("[red]❌ 설정 오류:[/red]")
        for err in errors:
            console.print(f"  • {err}", style="red")
        console.print(
            "\n[yellow]💡 .env 파일을 확인해 주세요. "
            ".env.example을 참고하세요.[/yellow]"
        )
        return False

    console.print("[green]✅ 모든 설정이 정상입니다![/green]")

    table = Table(title="현재 설정")
    table.add_column("항목", style="cyan")
    table.add_column("값", style="green")
    table.add_row("임베딩 모델", Config.EMBEDDING_MODEL)
    table.add_row("임베딩 차원", str(Config.EMBEDDING_DIMENSION))
    table.add_row("챗봇 모델", Config.CHAT_MODEL)
    table.add_row("청크 크기", f"{Config.CHUNK_SIZE}자")
    table.add_row("검색 개수(top-k)", str(Config.TOP_K))
    table.add_row("문서 폴더", Config.DOCUMENTS_DIR)
    console.print(table)
    return True


def build_index(paths: list[str]) -> tuple[VectorIndex, Embedder] | None:
    """문서를 읽어 새 인덱스를 만듭니다. 실패하면 None."""
    errors = Config.validate()
    if errors:
        console.print("[red]❌ 먼저 설정을 완료해 주세요 (python main.py check)[/red]")
        return None

    file_paths = expand_paths(paths or [Config.DOCUMENTS_DIR])
    if not file_paths:
        console.print("[yellow]📭 처리할 문서가 없습니다.[/yellow]")
        console.print(f"{Config.DOCUMENTS_DIR} 폴더에 PDF를 넣거나 경로를 지정하세요.")
        return None

    index = VectorIndex()
    embedder = Embedder()

    console.print(f"\n[bold]📤 문서 {len(file_paths)}개 처리 시작[/bold]\n")

    def on_progress(percent, message):
        console.print(f"  [{percent:3d}%] {message}")

    report = ingest_files(file_paths, index, embedder, on_progress=on_progress)

    table = Table(title=f"📚 불러온 문서 ({len(report.documents)}개)")
    table.add_column("출처", style="green")
    table.add_column("종류", style="yellow")
    table.add_column("페이지", justify="right")
    table.add_column("글자 수", justify="right")
    table.add_column("청크 수", justify="right", style="cyan")
    for doc in report.documents:
        table.add_row(
            doc["source_id"],
            doc["file_type"],
            str(doc.get("page_count", "-")),
            f"{doc['text_length']:,}",
            str(doc["chunk_count"]),
        )
    console.print(table)

    for path, reason in report.skipped:
        console.print(f"[yellow]⚠️ 건너뜀: {path} ({reason})[/yellow]")

    if len(index) == 0:
        console.print("[red]❌ 인덱스에 저장된 청크가 없습니다.[/red]")
        return None

    return index, embedder


def print_error(e: RAGError):
    """오류를 출력합니다. 수집 도중 멈췄다면 그때까지 처리한 문서 수도 보여줍니다."""
    console.print(f"[red]❌ 오류 발생: {e}[/red]")
    if e.partial_report is not None:
        console.print(
            f"[yellow]⚠️ 중단 전까지 {len(e.partial_report.documents)}개 문서, "
            f"{e.partial_report.chunk_count}개 청크를 처리했습니다.[/yellow]"
        )


def cmd_ingest(paths: list[str]):
    """문서를 읽어 인덱스를 만들고 결과를 보여줍니다."""
    try:
        built = build_index(paths)
    except RAGError as e:
        print_error(e)
        return
    if built:
        index, _ = built
        console.print(
            f"[green]✅ 총 {len(index)}개 청크 (차원 {index.dimension})[/green]"
        )


def cmd_search(args: list[str]):
    """질문 하나에 대한 검색 결과를 보여줍니다."""
    if not args:
        console.print("[red]❌ 검색할 질문을 입력하세요.[/red]")
        console.print('사용법: python main.py search "질문" [파일경로...]')
        return

    question, paths = args[0], args[1:]
    try:
        built = build_index(paths)
        if not built:
            return
        retriever = Retriever(*built)
        results = retriever.search(question)
    except RAGError as e:
        print_error(e)
        return

    for rank, result in enumerate(results, 1):
        console.print(
            Panel(
                result.fragment.content,
                title=f"{rank}. {result.fragment.id} (유사도 {result.score:.3f})",
                border_style="cyan",
            )
        )


def cmd_chat(paths: list[str]):
    """대화형 챗봇을 시작합니다."""
    try:
        built = build_index(paths)
    except RAGError as e:
        print_error(e)
        return
    if not built:
        return

    console.print(
        Panel(
            "[bold cyan]💬 RAG 챗봇 시작![/bold cyan]\n\n"
            "불러온 문서를 바탕으로 질문에 답변합니다.\n"
            "종료하려면 'quit' 또는 'exit'를 입력하세요.\n"
            "대화 초기화: 'reset'",
            border_style="cyan",
        )
    )

    chatbot = RAGChatbot(Retriever(*built))

    while True:
        try:
            console.print()
            question = console.input("[bold green]❓ 질문: [/bold green]")
            question = question.strip()

            if not question:
                continue
            if question.lower() in EXIT_COMMANDS:
                console.print("[dim]👋 챗봇을 종료합니다.[/dim]")
                break
            if question.lower() in RESET_COMMANDS:
                chatbot.reset_history()
                console.print("[yellow]🔄 대화 기록이 초기화되었습니다.[/yellow]")
                continue

            console.print("\n[bold blue]🤖 답변:[/bold blue]")
            chatbot.ask(question, stream=True)

        except (KeyboardInterrupt, EOFError):
            console.print("\n[dim]👋 챗봇을 종료합니다.[/dim]")
            break
        except RAGError as e:
            console.print(f"[red]❌ 오류: {e}[/red]")


def print_help():
    """도움말을 출력합니다."""
    help_text = """
## 사용법

| 명령어 | 설명 | 예시 |
|--------|------|------|
| `check` | 설정 확인 | `python main.py check` |
| `ingest` | 문서 읽기 테스트 | `python main.py ingest 보고서.pdf` |
| `search` | 한 번 검색 | `python main.py search "질문" documents/` |
| `chat` | 대화형 챗봇 시작 | `python main.py chat` |

경로를 생략하면 `documents/` 폴더(DOCUMENTS_DIR)의 파일을 사용합니다.

## 지원 파일 형식
- **PDF**: .pdf
- **텍스트**: .txt, .md

## 시작하기
1. `.env.example`을 `.env`로 복사
2. `.env`에 API 키 입력
3. `python main.py check`로 설정 확인
4. `documents/` 폴더에 PDF 넣기
5. `python main.py chat`로 질문하기
    """
    console.print(Markdown(help_text))


def main():
    """메인 함수: 명령줄 인수를 파싱하여 적절한 명령을 실행합니다."""
    setup_logger()
    print_banner()

    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()

    if command == "check":
        cmd_check()
    elif command == "ingest":
        cmd_ingest(sys.argv[2:])
    elif command == "search":
        cmd_search(sys.argv[2:])
    elif command == "chat":
        cmd_chat(sys.argv[2:])
    elif command in ("help", "-h", "--help"):
        print_help()
    else:
        console.print(f"[red]❌ 알 수 없는 명령: {command}[/red]")
        print_help()


if __name__ == "__main__":
    main()
