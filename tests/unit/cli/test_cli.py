"""
Tests for the futuna command line

Drives the click group end to end against a SQLite database with a scripted
model adapter swapped in for the default service wiring.
"""

import importlib
import json
import logging
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from futuna.application import build_service
from futuna.cli import cli
from futuna.domain.exceptions import TransportError


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "database": {"database_url": f"sqlite:///{tmp_path / 'cli.db'}"},
                "openai": {"api_key": "sk-test"},
                "analyzer": {"batch_size": 2, "max_concurrency": 2},
            }
        )
    )
    return str(path)


@pytest.fixture
def invoke(config_path, monkeypatch):
    runner = CliRunner()
    analyze_module = importlib.import_module("futuna.cli.groups.analyze")

    def _invoke(*args, adapter=None):
        if adapter is not None:
            monkeypatch.setattr(
                analyze_module, "build_service", lambda config, db: build_service(config, db, adapter=adapter)
            )
        return runner.invoke(cli, ["--quiet", "--config", config_path, *args])

    return _invoke


@pytest.fixture
def seeded(invoke):
    assert invoke("db", "init").exit_code == 0
    assert invoke("tickers", "add", "fpt", "VNM", "HPG").exit_code == 0
    return invoke


def test_db_init_and_check(invoke):
    result = invoke("db", "init")
    assert result.exit_code == 0
    assert "Database tables created" in result.output

    result = invoke("db", "check")
    assert result.exit_code == 0
    assert "Database: OK" in result.output


def test_tickers_add_and_list(seeded):
    result = seeded("tickers", "add", "FPT", "ACB")
    assert "Added 1 tickers" in result.output

    result = seeded("tickers", "list")
    assert result.exit_code == 0
    lines = [line.split()[0] for line in result.output.splitlines()[2:] if line.strip()]
    assert lines == ["ACB", "FPT", "HPG", "VNM"]


def test_analyze_stores_results(seeded, fake_adapter_cls):
    adapter = fake_adapter_cls()
    result = seeded("analyze", adapter=adapter)

    assert result.exit_code == 0, result.output
    assert "Analysis completed" in result.output
    assert "analyses stored: 3" in result.output
    assert [len(call) for call in adapter.calls] == [2, 1]

    result = seeded("analyses", "list", "--date", "2024-01-15", "--format", "json")
    assert result.exit_code == 0
    records = json.loads(result.output[result.output.index("[") :])
    assert [r["ticker"] for r in records] == ["FPT", "HPG", "VNM"]
    assert records[0]["date"] == "2024-01-15"

    result = seeded("analyses", "dates")
    assert result.output.strip().splitlines()[-1] == "2024-01-15"


def test_analyze_options_override_config(seeded, fake_adapter_cls):
    adapter = fake_adapter_cls()
    result = seeded("analyze", "--batch-size", "1", "--concurrency", "1", adapter=adapter)

    assert result.exit_code == 0
    assert len(adapter.calls) == 3


def test_analyze_exits_nonzero_on_failure(seeded, fake_adapter_cls):
    adapter = fake_adapter_cls(script={"FPT": TransportError("upstream down")})
    result = seeded("analyze", "--concurrency", "1", adapter=adapter)

    assert result.exit_code == 1
    assert "1 failed" in result.output


def test_analyses_list_text_for_empty_day(seeded):
    result = seeded("analyses", "list", "--date", "2001-02-03")

    assert result.exit_code == 0
    assert "No analyses for 2001-02-03" in result.output


def test_analyses_list_rejects_bad_date(seeded):
    result = seeded("analyses", "list", "--date", "15/01/2024")
    assert result.exit_code == 2


def test_startup_skipped_when_disabled(seeded, fake_adapter_cls):
    adapter = fake_adapter_cls()
    result = seeded("startup", adapter=adapter)

    assert result.exit_code == 0
    assert "Initial analysis skipped" in result.output
    assert adapter.calls == []


def test_startup_failure_does_not_fail_process(seeded, config_path, fake_adapter_cls):
    config = yaml.safe_load(Path(config_path).read_text())
    config["analyzer"]["analyze_on_start"] = True
    Path(config_path).write_text(yaml.safe_dump(config))
    adapter = fake_adapter_cls(script={"FPT": TransportError("upstream down")})

    result = seeded("startup", adapter=adapter)

    assert result.exit_code == 0
    assert "1 failed" in result.output


def test_analyze_uses_configured_openai_adapter(seeded, config_path):
    config = yaml.safe_load(Path(config_path).read_text())
    config["openai"]["api_key"] = ""
    Path(config_path).write_text(yaml.safe_dump(config))

    result = seeded("analyze")

    assert result.exit_code == 1
    assert "OPENAI_API_KEY is not set" in result.output


def test_tickers_list_json(seeded):
    result = seeded("tickers", "list", "--format", "json")

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {"symbol": "FPT", "name": "FPT"},
        {"symbol": "HPG", "name": "HPG"},
        {"symbol": "VNM", "name": "VNM"},
    ]
