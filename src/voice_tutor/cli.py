"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from voice_tutor.api import create_app
from voice_tutor.config import load_config
from voice_tutor.correction.handler import build_correction_handler

app = typer.Typer(
    name="voice-tutor",
    help="Spoken-language grammar correction service",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    log_level: str = typer.Option("info", "--log-level", help="Logging level"),
) -> None:
    """Run the HTTP API."""
    _setup_logging(log_level)
    config = load_config(config_path)
    host = host or config.server.host
    port = port or config.server.port

    provider = "anthropic" if config.provider.is_configured else "mock"
    console.print(f"[green]Voice Tutor on http://{host}:{port}[/green]")
    console.print(f"[dim]provider: {provider} | mode: {config.provider.mode}[/dim]")

    uvicorn.run(create_app(config), host=host, port=port, log_level=log_level.lower())


@app.command()
def correct(
    text: str = typer.Argument(help="Utterance to correct"),
    language: str = typer.Option("en-US", "--language", "-l", help="Language code, e.g. en-GB"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    log_level: str = typer.Option("warning", "--log-level", help="Logging level"),
) -> None:
    """Correct a single utterance and print the segments."""
    _setup_logging(log_level)
    config = load_config(config_path)
    handler = build_correction_handler(config.provider)

    result = asyncio.run(handler.handle(text, language))
    if result.status != 200:
        console.print(f"[red]{result.status}: {result.body.get('error')}[/red]")
        raise typer.Exit(1)

    table = Table(title="Corrections")
    table.add_column("Text")
    table.add_column("OK")
    table.add_column("Correction")
    table.add_column("Explanation", style="dim")
    for segment in result.body:
        if not isinstance(segment, dict):
            segment = {"text": segment}
        ok = segment.get("isCorrect")
        table.add_row(
            str(segment.get("text", "")),
            "[green]yes[/green]" if ok else "[red]no[/red]",
            str(segment.get("correction") or ""),
            str(segment.get("explanation") or ""),
        )
    console.print(table)


if __name__ == "__main__":
    app()
