"""Typer CLI application for quiz generation."""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ai_quiz import __version__
from ai_quiz.config.logging import configure_logging
from ai_quiz.config.settings import get_settings
from ai_quiz.generation.errors import GenerationFailed
from ai_quiz.generation.orchestrator import QuizGenerator
from ai_quiz.models.quiz import FeedbackRequest, QuestionDifficulty, Quiz, QuizRequest

app = typer.Typer(
    name="ai-quiz",
    help="AI-powered multiple choice quizzes from local or hosted LLMs",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def build_generator() -> QuizGenerator:
    """Create the generator from the current settings."""
    return QuizGenerator.from_settings(get_settings())


def run_quiz_generation(generator: QuizGenerator, request: QuizRequest) -> Quiz:
    """Generate a quiz behind a spinner, exiting with code 1 on failure."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"[cyan]Generating questions on {request.topic}...", total=None)
            return asyncio.run(generator.generate_questions(request))
    except GenerationFailed as e:
        console.print(f"\n[red]Error during quiz generation:[/red] {e}", style="bold")
        raise typer.Exit(code=1)


def run_feedback_generation(generator: QuizGenerator, request: FeedbackRequest) -> str:
    try:
        feedback = asyncio.run(generator.generate_feedback(request))
    except GenerationFailed as e:
        console.print(f"\n[red]Error during feedback generation:[/red] {e}", style="bold")
        raise typer.Exit(code=1)
    return feedback.message


@app.command()
def generate(
    topic: str = typer.Option(..., "--topic", "-t", help="Quiz topic"),
    questions: int = typer.Option(
        5,
        "--questions",
        "-q",
        help="Number of questions",
        min=1,
        max=20,
    ),
    difficulty: QuestionDifficulty = typer.Option(
        QuestionDifficulty.MEDIUM,
        "--difficulty",
        "-d",
        help="Difficulty level",
        case_sensitive=False,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the quiz as JSON instead of a table",
    ),
) -> None:
    """
    Generate a quiz and print it.

    Example:
        ai-quiz generate -t "Space Exploration" -q 5 -d medium
    """
    request = QuizRequest(topic=topic, num_questions=questions, difficulty=difficulty)
    quiz = run_quiz_generation(build_generator(), request)

    if as_json:
        console.print_json(json.dumps(quiz.model_dump(by_alias=True)))
    else:
        display_quiz(quiz)


@app.command()
def play(
    topic: str = typer.Option(..., "--topic", "-t", help="Quiz topic"),
    difficulty: QuestionDifficulty = typer.Option(
        QuestionDifficulty.MEDIUM,
        "--difficulty",
        "-d",
        help="Difficulty level",
        case_sensitive=False,
    ),
) -> None:
    """Take a five question quiz in the terminal and get feedback."""
    generator = build_generator()
    quiz = run_quiz_generation(generator, QuizRequest(topic=topic, difficulty=difficulty))

    answers: dict[str, int] = {}
    for number, question in enumerate(quiz.questions, start=1):
        console.print(f"\n[bold cyan]Question {number}/{quiz.question_count}[/bold cyan] {question.text}")
        for i, option in enumerate(question.options, start=1):
            console.print(f"  {i}. {option}")
        answers[question.id] = ask_option() - 1

    score = quiz.score(answers)
    console.print(f"\n[bold]Your Score: {score}/{quiz.question_count}[/bold]")

    message = run_feedback_generation(
        generator, FeedbackRequest(topic=quiz.topic, score=score, total=quiz.question_count)
    )
    console.print(Panel(message, title="Feedback", border_style="green"))


@app.command()
def feedback(
    topic: str = typer.Option(..., "--topic", "-t", help="Quiz topic"),
    score: int = typer.Option(..., "--score", "-s", help="Correct answers", min=0),
    total: int = typer.Option(..., "--total", help="Number of questions", min=1),
) -> None:
    """Ask the model for feedback on a quiz score."""
    if score > total:
        console.print("[red]Error:[/red] score cannot exceed total", style="bold")
        raise typer.Exit(code=1)

    message = run_feedback_generation(
        build_generator(), FeedbackRequest(topic=topic, score=score, total=total)
    )
    console.print(Panel(message, title="Feedback", border_style="green"))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ai_quiz.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@app.command()
def info() -> None:
    """Display configuration and the active backends."""
    settings = get_settings()
    generator = build_generator()

    table = Table(title="AI Quiz Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Version", __version__)
    table.add_row("Backends (in order)", ", ".join(generator.backend_names) or "[red]none[/red]")
    table.add_row("Ollama", f"{settings.ollama_model} @ {settings.ollama_base_url}")
    table.add_row("Gemini key", "present" if settings.gemini_api_key else "not set")
    if settings.gemini_model:
        table.add_row("Preferred Gemini model", settings.gemini_model)
    table.add_row("Attempts per backend", str(settings.max_attempts))

    console.print()
    console.print(table)


def ask_option() -> int:
    """Prompt until the user picks an option number between 1 and 4."""
    while True:
        choice = typer.prompt("Your answer (1-4)", type=int)
        if 1 <= choice <= 4:
            return choice
        console.print("[yellow]Please enter a number from 1 to 4.[/yellow]")


def display_quiz(quiz: Quiz) -> None:
    """Display the generated questions with the correct answer marked."""
    table = Table(title=f"Quiz: {quiz.topic}", border_style="green", show_lines=True)
    table.add_column("#", style="cyan")
    table.add_column("Question", style="white")
    table.add_column("Options", style="white")

    for number, question in enumerate(quiz.questions, start=1):
        options = "\n".join(
            f"[green]{i + 1}. {option} ✓[/green]" if i == question.correct_index else f"{i + 1}. {option}"
            for i, option in enumerate(question.options)
        )
        table.add_row(str(number), question.text, options)

    console.print()
    console.print(table)


@app.callback()
def callback() -> None:
    """
    AI Quiz - generate multiple choice quizzes with local or hosted LLMs.
    """
    configure_logging(get_settings().log_level, console=err_console)


if __name__ == "__main__":
    app()
