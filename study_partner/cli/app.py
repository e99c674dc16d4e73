"""Typer CLI application for the study partner."""

from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from study_partner import __version__
from study_partner.client.api import StudyPartnerAPI
from study_partner.config.logging_setup import configure_logging
from study_partner.config.settings import get_settings
from study_partner.models import ChatMessage
from study_partner.panels.chat import ChatPanel
from study_partner.panels.quiz import (
    GREAT_JOB,
    KEEP_STUDYING,
    PERFECT_SCORE,
    OptionMark,
    QuizPanel,
    QuizPanelState,
    option_mark,
    verdict,
)

app = typer.Typer(
    name="study-partner",
    help="AI study partner: study chat and quiz generation backed by Gemini",
    add_completion=False,
)

console = Console()

EXIT_WORDS = {"/exit", "/quit"}

MARK_STYLES = {
    OptionMark.NONE: ("  ", "white"),
    OptionMark.SELECTED: ("> ", "blue"),
    OptionMark.CORRECT: ("✓ ", "green"),
    OptionMark.INCORRECT: ("✗ ", "red"),
}

VERDICT_STYLES = {
    PERFECT_SCORE: "green",
    GREAT_JOB: "yellow",
    KEEP_STUDYING: "red",
}


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind host (default: HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """
    Run the API server.

    Example:
        study-partner serve --port 3001
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    if not settings.gemini_configured:
        console.print(
            "[yellow]Warning:[/yellow] GEMINI_API_KEY is not set. "
            "Chat and quiz endpoints will answer 503 until it is."
        )

    uvicorn.run(
        "study_partner.api.server:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def chat(
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="API server URL (default: STUDY_PARTNER_API_URL)"
    ),
) -> None:
    """
    Chat with the study partner. Use "/search <query>" to search Wikipedia.

    Example:
        study-partner chat
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    with StudyPartnerAPI(api_url or settings.api_url, timeout=settings.api_timeout) as api:
        panel = ChatPanel(api)
        display_message(panel.messages[0])
        console.print("[dim]Type /exit to leave.[/dim]")

        while True:
            text = Prompt.ask("\n[bold blue]You[/bold blue]")
            if text.strip().lower() in EXIT_WORDS:
                break

            seen = len(panel.messages)
            with console.status("[cyan]Thinking...", spinner="dots"):
                panel.send(text)

            # The user's own message is already on screen
            for message in panel.messages[seen:]:
                if message.role == "assistant":
                    display_message(message)


@app.command()
def quiz(
    topic: Optional[str] = typer.Argument(None, help="Quiz topic, asked for if omitted"),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="API server URL (default: STUDY_PARTNER_API_URL)"
    ),
) -> None:
    """
    Generate a five question quiz on a topic, answer it and get scored.

    Example:
        study-partner quiz "Computer Networks"
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    while not topic or not topic.strip():
        topic = Prompt.ask("[bold]Enter a topic[/bold] (e.g., Calculus, World History)")

    with StudyPartnerAPI(api_url or settings.api_url, timeout=settings.api_timeout) as api:
        panel = QuizPanel(api)

        with console.status("[cyan]Generating your quiz...", spinner="dots"):
            state = panel.generate(topic)

        if state.alert:
            console.print(f"[red]Error:[/red] {state.alert}", style="bold")
            raise typer.Exit(code=1)

        for q_index, question in enumerate(state.questions):
            display_question(state, q_index)
            choice = IntPrompt.ask(
                "Your answer",
                choices=[str(n) for n in range(1, len(question.options) + 1)],
            )
            panel.select(q_index, choice - 1)

        state = panel.submit()

    console.print()
    for q_index in range(state.total_questions):
        display_question(state, q_index)
    display_results(state)


@app.command()
def info() -> None:
    """Display information about the study partner."""
    settings = get_settings()
    info_text = f"""
[bold cyan]AI Study Partner[/bold cyan]
Version: {__version__}

[bold]Panels:[/bold]
  • Study Chat - Ask questions, or "/search <query>" for Wikipedia hits
  • Quiz Generator - Five multiple choice questions on any topic

[bold]API:[/bold]
  • POST /api/chat
  • GET  /api/search?q=...
  • POST /api/generate-quiz

[bold]Model:[/bold] {settings.model_name} (Google Gemini)
[bold]Gemini key:[/bold] {"configured" if settings.gemini_configured else "[red]missing[/red]"}
[bold]API URL:[/bold] {settings.api_url}
    """
    console.print(Panel(info_text, title="Study Partner Info", border_style="cyan"))


def display_message(message: ChatMessage) -> None:
    """Display one assistant message."""
    console.print(
        Panel(
            Text(message.content),
            title="Study Partner",
            title_align="left",
            border_style="green",
        )
    )


def display_question(state: QuizPanelState, q_index: int) -> None:
    """Display a question with its options marked for the current phase."""
    question = state.questions[q_index]
    console.print(f"\n[bold]{q_index + 1}. {escape(question.question_text)}[/bold]")

    for o_index, option in enumerate(question.options):
        prefix, style = MARK_STYLES[option_mark(state, q_index, o_index)]
        console.print(f"  {prefix}[{style}]{o_index + 1}) {escape(option)}[/{style}]")


def format_score(score: int, total: int) -> str:
    """Score markup coloured by its verdict."""
    style = VERDICT_STYLES[verdict(score, total)]
    return f"[{style}]{score} / {total}[/{style}]"


def display_results(state: QuizPanelState) -> None:
    """Display the score of a submitted quiz."""
    table = Table(title="Quiz Results", border_style="green", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    score = state.score or 0
    total = state.total_questions

    table.add_row("Topic", escape(state.topic))
    table.add_row("Score", format_score(score, total))
    table.add_row("Verdict", verdict(score, total))

    console.print()
    console.print(table)


@app.callback()
def callback() -> None:
    """
    AI Study Partner - Study chat and quizzes from the command line.
    """
    pass


if __name__ == "__main__":
    app()
