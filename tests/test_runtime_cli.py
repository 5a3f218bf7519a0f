"""Configuration, runtime wiring and CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from analysis.provider_factory import build_provider
from analysis.providers.heuristic import HeuristicProvider
from analysis.providers.passthrough import PassthroughProvider
from analysis.providers.remote import RemoteModelProvider
from core.config import load_effective_config, merge_dicts
from core.runtime import RuntimeBuilder
from history.stores.json_store import JsonFileStore
from llm.providers.mock_provider import MockProvider
from ui.cli.cli import app

FAKE_TEXT = "Scientists confirm miracle cure, guaranteed 100% results"


def _write_config(root: Path, store: str = "json", provider: str = "heuristic") -> None:
    config_dir = root / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "default.yaml").write_text(
        "history:\n"
        f"  store: {store}\n"
        "analysis:\n"
        f"  provider: {provider}\n",
        encoding="utf-8",
    )
    (config_dir / "models.yaml").write_text(
        "heuristic:\n  latency_seconds: 0\npassthrough:\n  backend: mock\n",
        encoding="utf-8",
    )


@pytest.fixture(autouse=True)
def _no_provider_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VERINEWS_PROVIDER", raising=False)


def test_merge_and_load_config(tmp_path: Path) -> None:
    assert merge_dicts({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}}) == {"a": {"b": 1, "c": 3}}
    assert load_effective_config(tmp_path) == {"models": {}}

    _write_config(tmp_path)
    config = load_effective_config(tmp_path)
    assert config["analysis"]["provider"] == "heuristic"
    assert config["models"]["passthrough"]["backend"] == "mock"


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "default.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_effective_config(tmp_path)


def test_build_provider_by_tag(monkeypatch: pytest.MonkeyPatch) -> None:
    config = {"analysis": {"provider": "heuristic"}, "models": {"passthrough": {"backend": "mock"}}}
    assert isinstance(build_provider(config), HeuristicProvider)

    passthrough = build_provider(config, name="passthrough")
    assert isinstance(passthrough, PassthroughProvider)
    assert isinstance(passthrough.llm, MockProvider)

    monkeypatch.setenv("VERINEWS_PROVIDER", "remote")
    remote = build_provider(config)
    assert isinstance(remote, RemoteModelProvider)
    assert remote.supports_grounding is True

    with pytest.raises(ValueError):
        build_provider(config, name="oracle")


def test_runtime_builder_loads_persisted_history(tmp_path: Path) -> None:
    _write_config(tmp_path)
    bundle = RuntimeBuilder(root=tmp_path).build()
    assert isinstance(bundle.ledger.store, JsonFileStore)
    bundle.orchestrator.submit(FAKE_TEXT)

    reopened = RuntimeBuilder(root=tmp_path).build()
    assert [item.title for item in reopened.ledger.items] == [FAKE_TEXT[:50] + "..."]
    assert (tmp_path / "logs" / "audit.jsonl").exists()


def test_cli_analyze_and_history(tmp_path: Path) -> None:
    _write_config(tmp_path, store="sqlite")
    runner = CliRunner()
    root = ["--root", str(tmp_path)]

    analyzed = runner.invoke(app, [*root, "analyze", FAKE_TEXT, "--json"])
    assert analyzed.exit_code == 0, analyzed.output
    payload = json.loads(analyzed.stdout)
    assert payload["verdict"] == "FAKE"
    assert payload["confidence"] == 85
    assert payload["sources"] == []

    listed = runner.invoke(app, [*root, "history", "list", "--json"])
    assert listed.exit_code == 0
    assert [item["verdict"] for item in json.loads(listed.stdout)] == ["FAKE"]

    cleared = runner.invoke(app, [*root, "history", "clear", "--yes"])
    assert cleared.exit_code == 0
    listed = runner.invoke(app, [*root, "history", "list"])
    assert "Logs empty." in listed.stdout


def test_cli_pretty_output_and_input_error(tmp_path: Path) -> None:
    _write_config(tmp_path)
    runner = CliRunner()

    pretty = runner.invoke(app, ["--root", str(tmp_path), "analyze", FAKE_TEXT])
    assert pretty.exit_code == 0
    assert "VERDICT:" in pretty.stdout
    assert "Linguistic Bias" in pretty.stdout

    short = runner.invoke(app, ["--root", str(tmp_path), "analyze", "too short"])
    assert short.exit_code == 2


def test_cli_unknown_provider_is_configuration_error(tmp_path: Path) -> None:
    _write_config(tmp_path)
    result = CliRunner().invoke(app, ["--root", str(tmp_path), "analyze", FAKE_TEXT, "-p", "oracle"])
    assert result.exit_code == 2


def test_corrupt_sqlite_history_starts_empty(tmp_path: Path) -> None:
    _write_config(tmp_path, store="sqlite")
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "verinews.db").write_bytes(b"this is not a sqlite database at all" * 100)

    bundle = RuntimeBuilder(root=tmp_path).build()

    assert bundle.ledger.items == ()
    listed = CliRunner().invoke(app, ["--root", str(tmp_path), "history", "list"])
    assert listed.exit_code == 0
    assert "Logs empty." in listed.stdout


def test_runtime_root_defaults_to_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    bundle = RuntimeBuilder().build()

    assert isinstance(bundle.provider, HeuristicProvider)
    assert (tmp_path / "data").is_dir()
    assert (tmp_path / "logs").is_dir()


def test_cli_undecodable_file_is_input_error(tmp_path: Path) -> None:
    _write_config(tmp_path)
    article = tmp_path / "article.txt"
    article.write_bytes(b"\xff\xfe\xfa not utf-8 \x80\x81" * 4)

    result = CliRunner().invoke(app, ["--root", str(tmp_path), "analyze", "--file", str(article)])

    assert result.exit_code == 2
    assert not isinstance(result.exception, UnicodeDecodeError)
