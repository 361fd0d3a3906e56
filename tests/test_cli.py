# File: tests/test_cli.py
"""Tests for the CLI (`url_hasher/cli.py`) using click.testing.CliRunner.
Cover the `fetch` and `config` commands, `--version` and error handling.
"""
import inspect
import json

import pytest
import url_hasher.cli as cli_module
from click.testing import CliRunner
from url_hasher.cli import cli
from url_hasher.errors import FailureKind
from url_hasher.fetcher.models import FetchFailure, FetchSuccess
from url_hasher.logger import init_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """The group command re-targets logging at the runner streams; undo that afterwards."""
    yield
    init_logging()


@pytest.fixture()
def fake_engine(monkeypatch):
    """Replace Engine.stream with canned outcomes; records the dispatched calls."""
    calls = []

    async def fake_stream(self, worker_count, urls):
        calls.append((worker_count, list(urls), self.config))
        for url in urls:
            if "fail" in url:
                yield FetchFailure(url, FailureKind.TRANSPORT, "ClientConnectorError: refused")
            else:
                yield FetchSuccess(url, bytes.fromhex("47bce5c74f589f4867dbd57e9ca9f808"))

    monkeypatch.setattr(cli_module.Engine, "stream", fake_stream)
    return calls


def test_cli_module_is_importable_by_name():
    assert inspect.ismodule(cli_module)
    assert cli_module.cli is cli
    assert hasattr(cli_module, "Engine")


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "url-hasher" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps({"parallel": 5, "request_timeout": 1.0}), encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["parallel"] == 5
    assert data["request_timeout"] == 1.0


def test_broken_config(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("parallel: zero", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output


def test_fetch_prints_every_outcome(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(
        cli, ["fetch", "--parallel", "2", "http://a.example/", "http://fail.example/"]
    )
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "http://a.example/ 47bce5c74f589f4867dbd57e9ca9f808" in lines
    assert "http://fail.example/: ClientConnectorError: refused" in lines
    assert fake_engine[0][0] == 2


def test_fetch_reports_invalid_urls(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["fetch", "not a url", "http://validhost/ok"])
    assert result.exit_code == 0
    assert 'Invalid url: "not a url"' in result.output.splitlines()
    assert fake_engine[0][1] == ["http://validhost/ok"]


def test_fetch_repairs_scheme(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["fetch", "example.com"])
    assert result.exit_code == 0
    assert fake_engine[0][1] == ["http://example.com"]


@pytest.mark.parametrize(
    "args,message",
    [
        (["fetch", "--parallel", "0", "http://a.example/"], "Invalid number of parallel workers"),
        (["fetch"], "List of urls to visit is empty"),
    ],
)
def test_fetch_parameter_errors(fake_engine, tmp_path, monkeypatch, args, message):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, args)
    assert result.exit_code == 1
    assert message in result.output
    assert 'Use "url-hasher fetch --help"' in result.output
    assert fake_engine == []


def test_fetch_timeout_override(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["fetch", "--timeout", "0.25", "http://a.example/"])
    assert result.exit_code == 0
    assert fake_engine[0][2].request_timeout == 0.25

    result = runner.invoke(cli, ["fetch", "--timeout=-1", "http://a.example/"])
    assert result.exit_code == 1
    assert "Invalid --timeout" in result.output


def test_fetch_json_report(fake_engine, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "reports" / "digests.json"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["fetch", "--json", str(out), "--pretty", "bad url", "http://a.example/", "http://fail.example/"],
    )
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["results"][0]["url"] == "http://a.example/"
    assert data["failures"][0]["kind"] == "transport"
    assert data["invalid"][0]["url"] == "bad url"
