"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from answer_refiner.clients.llm_client import LLMClient
from answer_refiner.config import load_config
from answer_refiner.errors import RefinerError
from answer_refiner.models.profile import UserProfile
from answer_refiner.models.request import LimitObject, RefinementRequest
from answer_refiner.pipeline.answer_generator import AnswerGenerator
from answer_refiner.pipeline.context_aggregator import build_context
from answer_refiner.pipeline.length_enforcer import measure
from answer_refiner.pipeline.orchestrator import AnswerRefiner
from answer_refiner.pipeline.request_validator import LIMIT_TYPES
from answer_refiner.pipeline.styles import STYLE_TEMPLATES, list_style_keys

app = typer.Typer(
    name="answer-refiner",
    help="Rewrite application answers in a chosen style within a hard length limit",
    no_args_is_help=True,
)
console = Console()


def _read_text(text: str | None, file: Path | None) -> str:
    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found: {file}[/red]")
            raise typer.Exit(1)
        return file.read_text(encoding="utf-8")
    if text is None:
        console.print("[red]Provide the text as an argument or with --file[/red]")
        raise typer.Exit(1)
    return text


@app.command()
def refine(
    answer: str = typer.Argument(None, help="Answer text to refine"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the answer from a file"),
    question: str = typer.Option(..., "--question", "-q", help="The application question"),
    style: str = typer.Option("professional", "--style", "-s", help="Refinement style key"),
    limit: int = typer.Option(..., "--limit", "-l", help="Maximum length"),
    unit: str = typer.Option("words", "--unit", "-u", help="words or characters"),
    context_file: Path = typer.Option(
        None, "--context-file", help="JSON profile used as startup context"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show prompt metadata"),
) -> None:
    """Refine one answer locally (no auth, optional JSON profile as context)."""
    original = _read_text(answer, file)
    if style not in STYLE_TEMPLATES:
        console.print(f"[red]Unknown style '{style}'. Valid: {', '.join(list_style_keys())}[/red]")
        raise typer.Exit(1)
    if unit not in LIMIT_TYPES or limit <= 0:
        console.print("[red]--limit must be positive and --unit one of words/characters[/red]")
        raise typer.Exit(1)

    config = load_config()
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    context = None
    if context_file is not None:
        profile = UserProfile(**json.loads(context_file.read_text(encoding="utf-8")))
        context = build_context(profile, config.refiner.context_max_chars)

    llm = LLMClient(timeout=config.llm.timeout, max_attempts=config.llm.max_retries)
    generator = AnswerGenerator(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    refiner = AnswerRefiner(generator)
    request = RefinementRequest(
        original_answer=original,
        refinement_style=style,
        question_context=question,
        limit_object=LimitObject(type=unit, value=limit),
    )

    with console.status("Refining answer..."):
        try:
            result = asyncio.run(refiner.refine_request(request, context))
        except RefinerError as e:
            console.print(f"[red]{e.kind}: {e.message}[/red]")
            raise typer.Exit(1)

    console.print(Panel(result.refined_text, title=f"Refined ({style})"))
    v = result.validation
    color = "yellow" if v.was_truncated else "green"
    console.print(
        f"[{color}]{v.current}/{v.limit} {v.type}"
        + (" (truncated)" if v.was_truncated else "")
        + f"[/{color}]  original: {result.original_counts.words} words, "
        f"{result.original_counts.characters} characters"
    )
    if verbose:
        console.print_json(data=result.metadata)


@app.command()
def styles() -> None:
    """List the available refinement styles."""
    table = Table(title="Refinement styles")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Description")
    for key in list_style_keys():
        style = STYLE_TEMPLATES[key]
        table.add_row(key, style.name, style.description)
    console.print(table)


@app.command("measure")
def measure_cmd(
    text: str = typer.Argument(None, help="Text to measure"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the text from a file"),
) -> None:
    """Print word and character counts the way limits are checked."""
    counts = measure(_read_text(text, file))
    console.print(f"words: {counts.words}  characters: {counts.characters}")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address"),
    port: int = typer.Option(None, "--port", "-p", help="Port"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from answer_refiner.api.server import create_app

    config = load_config()
    logging.basicConfig(
        level=config.server.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(config=config),
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    app()
