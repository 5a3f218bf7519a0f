"""Typer command handlers."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import typer

from analysis.schema import AnalysisResult, HistoryItem, Verdict
from core.config import load_effective_config
from core.errors import InputError, VeriNewsError
from core.runtime import RuntimeBuilder, RuntimeBundle

VERDICT_COLORS = {
    Verdict.REAL: typer.colors.GREEN,
    Verdict.LIKELY_REAL: typer.colors.CYAN,
    Verdict.MIXED: typer.colors.YELLOW,
    Verdict.LIKELY_FAKE: typer.colors.BRIGHT_RED,
    Verdict.FAKE: typer.colors.RED,
}

_options: dict[str, Any] = {"root": None, "verbose": False}


def configure(root: Path | None, verbose: bool) -> None:
    """Store global CLI options."""
    _options["root"] = root
    _options["verbose"] = verbose


def _configure_logging(config: dict[str, Any]) -> None:
    level_name = "DEBUG" if _options["verbose"] else str(config.get("logging", {}).get("level", "WARNING"))
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _runtime(provider: str | None = None) -> RuntimeBundle:
    builder = RuntimeBuilder(root=_options["root"], provider_name=provider)
    try:
        _configure_logging(load_effective_config(builder.root))
        return builder.build()
    except ValueError as exc:
        typer.secho(f"Configuration error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc


def metric_color(score: int) -> str:
    """Gauge color band for a 0-100 score."""
    if score > 80:
        return typer.colors.GREEN
    if score > 50:
        return typer.colors.CYAN
    return typer.colors.RED


def _read_text(text: str | None, file: Path | None) -> str:
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as exc:
            typer.secho(f"Cannot read {file}: {exc}", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=2) from exc
    if text is not None:
        return text
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return typer.prompt("news text")


def print_result(result: AnalysisResult) -> None:
    """Human-readable report."""
    typer.echo("---")
    typer.echo("VERDICT: " + typer.style(result.verdict.value, fg=VERDICT_COLORS[result.verdict], bold=True))
    typer.echo(f"CONFIDENCE: {result.confidence}%")
    typer.echo("SUMMARY:")
    typer.echo(f"  {result.summary or '(none)'}")
    if result.metrics:
        typer.echo("METRICS:")
        for metric in result.metrics:
            score = typer.style(f"{metric.score:>3}%", fg=metric_color(metric.score))
            typer.echo(f"  {score} {metric.name}: {metric.description}")
    if result.linguistic_patterns:
        tokens = " ".join(f"[{'_'.join(p.split()).upper()}]" for p in result.linguistic_patterns)
        typer.echo(f"LINGUISTIC PATTERNS: {tokens}")
    if result.logical_fallacies:
        typer.echo("LOGICAL FALLACIES:")
        for fallacy in result.logical_fallacies:
            typer.echo(f"  - {fallacy}")
    if result.sources:
        typer.echo("SOURCES:")
        for idx, source in enumerate(result.sources, start=1):
            typer.echo(f"  [{idx}] {source.title} - {source.uri}")


def _format_item(item: HistoryItem) -> str:
    when = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
    verdict = typer.style(item.verdict.value, fg=VERDICT_COLORS[item.verdict])
    return f"{when}  {verdict}  > {item.title}"


def analyze(text: str | None, file: Path | None, provider: str | None, json_output: bool) -> None:
    """Run one analysis and print it."""
    bundle = _runtime(provider=provider)
    content = _read_text(text, file)
    try:
        result = bundle.orchestrator.submit(content)
    except VeriNewsError as exc:
        typer.secho(exc.user_message, err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2 if isinstance(exc, InputError) else 1) from exc
    if json_output:
        typer.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
    else:
        print_result(result)


def history_list(json_output: bool = False) -> None:
    """Print session history."""
    bundle = _runtime()
    items = bundle.ledger.items
    if json_output:
        typer.echo(json.dumps([item.model_dump(mode="json") for item in items], indent=2))
        return
    if not items:
        typer.echo("Logs empty.")
        return
    for item in items:
        typer.echo(_format_item(item))


def history_clear(yes: bool = False) -> None:
    """Clear session history."""
    bundle = _runtime()
    if not yes and not typer.confirm(f"Delete {len(bundle.ledger)} history entries?"):
        raise typer.Abort()
    try:
        bundle.orchestrator.clear_history()
    except VeriNewsError as exc:
        typer.secho(exc.user_message, err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    typer.echo("History cleared.")


def config_show() -> None:
    """Show effective runtime config."""
    bundle = _runtime()
    typer.echo(json.dumps(bundle.config, indent=2, default=str))
