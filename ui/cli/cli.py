"""CLI entrypoint for verinews."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="VeriNews: credibility analysis for news text")
history_app = typer.Typer(help="Session history commands")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Project root holding config/, data/ and logs/ (defaults to the current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Global options."""
    commands.configure(root=root, verbose=verbose)


@app.command("analyze")
def analyze_cmd(
    text: Optional[str] = typer.Argument(None, help="News text; read from stdin when omitted"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read news text from a file"
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help="remote, heuristic or passthrough"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Analyze a news segment and record it in history."""
    commands.analyze(text=text, file=file, provider=provider, json_output=json_output)


@history_app.command("list")
def history_list_cmd(
    json_output: bool = typer.Option(False, "--json", help="Print history as JSON"),
) -> None:
    """Show session history, newest first."""
    commands.history_list(json_output=json_output)


@history_app.command("clear")
def history_clear_cmd(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all history entries."""
    commands.history_clear(yes=yes)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(history_app, name="history")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
