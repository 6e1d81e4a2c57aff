from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from content_insights.config import Settings, load_settings
from content_insights.errors import AnalysisError
from content_insights.history import HistoryStore
from content_insights.io import load_articles
from content_insights.logging_utils import setup_logging
from content_insights.models import AnalysisResult
from content_insights.service import analyze_keyword

__version__ = "0.1.0"

app = typer.Typer(add_completion=False, help="Content topic insight CLI")

log = logging.getLogger("content_insights.cli")


def _settings() -> Settings:
    try:
        settings = load_settings()
    except AnalysisError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    setup_logging(settings.log_level)
    return settings


def _print_result(result: AnalysisResult) -> None:
    s = result.stats
    typer.secho(f"Keyword: {result.keyword}", bold=True)
    typer.echo(
        f"Articles: {s.total_articles} | Avg reads: {s.avg_reads} | "
        f"Avg likes: {s.avg_likes} | Avg engagement: {s.avg_engagement}"
    )

    typer.echo()
    typer.secho("Top liked", bold=True)
    for row in result.top_liked:
        typer.echo(f"  {row.likes:>7} likes  {row.engagement:>5}  {row.title}")

    typer.echo()
    typer.secho("Top engagement", bold=True)
    for row in result.top_engagement:
        typer.echo(f"  {row.engagement:>5}  {row.reads:>8} reads  {row.title}")

    typer.echo()
    typer.secho("Word cloud", bold=True)
    typer.echo("  " + ", ".join(f"{w.word}({w.count})" for w in result.word_cloud))

    typer.echo()
    typer.secho("Topic insights", bold=True)
    for rank, ins in enumerate(result.insights, start=1):
        typer.echo("=" * 80)
        typer.echo(f"#{rank} [{ins.confidence}] {ins.title}")
        typer.echo(f"Stage: {ins.decision_stage.stage} | Audience: {ins.audience_scene.audience}"
                   f" | Scene: {ins.audience_scene.scene}")
        if ins.description:
            typer.echo(ins.description)
        if ins.tags:
            typer.echo("Tags: " + ", ".join(ins.tags))

    if result.warnings:
        typer.echo()
        typer.secho(f"{len(result.warnings)} validation warning(s)", fg=typer.colors.YELLOW)


@app.command()
def health() -> None:
    """Health check to verify config + logging works."""
    settings = _settings()
    log = logging.getLogger("content_insights.health")

    log.info("Health check OK.")
    log.info("API base: %s", settings.openai_api_base)
    log.info("Model: %s", settings.openai_model)
    log.info("API key configured: %s", bool(settings.openai_api_key))
    log.info("History file: %s", settings.history_file)

    typer.echo("OK")


@app.command()
def version() -> None:
    """Print version and exit."""
    typer.echo(f"content-insights {__version__}")


@app.command()
def analyze(
    keyword: str = typer.Argument(..., help="Keyword the articles were searched for"),
    articles_file: Path = typer.Option(..., "--articles", help="JSON/JSONL file with the articles to analyze"),
    limit: Optional[int] = typer.Option(None, help="Number of articles to analyze (default: MAX_ARTICLES)"),
    out_file: Optional[Path] = typer.Option(None, "--out", help="Write the full result as JSON"),
    no_history: bool = typer.Option(False, "--no-history", help="Do not record this run"),
) -> None:
    """
    Analyze articles for a keyword: summaries, ranked insights, word cloud.
    """
    settings = _settings()

    articles = load_articles(articles_file)
    if not articles:
        typer.secho("No articles found.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    store = None if no_history else HistoryStore(settings.history_file)

    try:
        result = analyze_keyword(settings, keyword, articles, history=store, limit=limit)
    except AnalysisError as e:
        log.error("Analysis failed: %s", e)
        typer.secho("Analysis failed, please retry.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if out_file is not None:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(json.dumps(result.to_wire(), ensure_ascii=False, indent=2), encoding="utf-8")
        typer.echo(f"Saved: {out_file}")

    _print_result(result)


@app.command()
def history(
    limit: int = typer.Option(50, help="Number of entries to show"),
) -> None:
    """
    List past analysis runs, newest first.
    """
    settings = _settings()
    entries = HistoryStore(settings.history_file).list(limit=limit)

    if not entries:
        typer.echo("No history yet.")
        return

    for e in entries:
        insights = len(e.result.insights) if e.result else 0
        typer.echo(f"{e.id}  {e.keyword}  articles={e.result_count}  insights={insights}")


@app.command()
def show(
    entry_id: int = typer.Argument(..., help="History entry id"),
) -> None:
    """
    Print a stored analysis run.
    """
    settings = _settings()
    entry = HistoryStore(settings.history_file).get(entry_id)

    if entry is None:
        typer.secho(f"No history entry {entry_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    if entry.result is None:
        typer.echo(f"{entry.keyword}: no stored result")
        return

    _print_result(entry.result)
