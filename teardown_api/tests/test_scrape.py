from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
import requests

from teardown_api.scraper import fetch
from teardown_api.scripts import scrape_api

SAMPLE_PATH = Path(__file__).resolve().parent / "data" / "api_sample.html"


@pytest.fixture()
def sandbox(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    shutil.copy(SAMPLE_PATH, tmp_path / "api.html")
    return tmp_path


def test_scrape_writes_output_then_reports_up_to_date(sandbox: Path) -> None:
    output = sandbox / "output"
    argv = ["--output", str(output), "scrape", "--input", str(sandbox / "api.html")]
    assert scrape_api.main(argv) == scrape_api.EXIT_OK
    assert (output / "version").read_text(encoding="utf-8") == "1.5.4"
    data = json.loads((output / "teardown_api2.json").read_text(encoding="utf-8"))
    assert data["version"] == "1.5.4"
    assert [function["name"] for function in data["functions"]] == [
        "GetIntParam",
        "GetStringParam",
    ]
    assert scrape_api.main(argv) == scrape_api.EXIT_UP_TO_DATE
    assert scrape_api.main(argv + ["--force"]) == scrape_api.EXIT_OK


def test_scrape_fetches_when_no_input(sandbox: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    requested: list[str] = []

    def fake_fetch(url: str, *, timeout: float | None = None) -> str:
        requested.append(url)
        return SAMPLE_PATH.read_text(encoding="utf-8")

    monkeypatch.setattr(fetch, "fetch_document", fake_fetch)
    argv = ["--url", "https://example.test/api.html", "--output", str(sandbox / "out"), "scrape"]
    assert scrape_api.main(argv) == scrape_api.EXIT_OK
    assert requested == ["https://example.test/api.html"]


def test_scrape_reports_transport_failure(sandbox: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_fetch(url: str, *, timeout: float | None = None) -> str:
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(fetch, "fetch_document", failing_fetch)
    argv = ["--output", str(sandbox / "out"), "scrape"]
    assert scrape_api.main(argv) == scrape_api.EXIT_ERROR
    assert not (sandbox / "out").exists()


def test_scrape_reports_missing_version(sandbox: Path) -> None:
    broken = sandbox / "broken.html"
    broken.write_text("<h1>Teardown API</h1><hr/><h3>Foo</h3>", encoding="utf-8")
    argv = ["--output", str(sandbox / "out"), "scrape", "--input", str(broken)]
    assert scrape_api.main(argv) == scrape_api.EXIT_ERROR


def test_check_is_a_dry_run(sandbox: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = sandbox / "output"
    argv = ["--output", str(output), "check", "--input", str(sandbox / "api.html")]
    assert scrape_api.main(argv) == scrape_api.EXIT_OK
    captured = capsys.readouterr().out
    assert "Parameters" in captured
    assert "Remote version: 1.5.4" in captured
    assert "Local version: none" in captured
    assert "Status: update available" in captured
    assert not output.exists()


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert scrape_api.main([]) == scrape_api.EXIT_OK
    assert "scrape" in capsys.readouterr().out


@pytest.mark.parametrize("value", ["0", "-5", "soon"])
def test_rejects_invalid_timeout_option(
    sandbox: Path, value: str, capsys: pytest.CaptureFixture[str]
) -> None:
    argv = ["--timeout", value, "--output", str(sandbox / "out"), "scrape"]
    with pytest.raises(SystemExit) as excinfo:
        scrape_api.main(argv)
    assert excinfo.value.code == 2
    assert "--timeout" in capsys.readouterr().err
    assert not (sandbox / "out").exists()


def test_non_positive_timeout_env_falls_back_to_default(
    sandbox: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    timeouts: list[float | None] = []

    def fake_fetch(url: str, *, timeout: float | None = None) -> str:
        timeouts.append(timeout)
        return SAMPLE_PATH.read_text(encoding="utf-8")

    monkeypatch.setenv("TEARDOWN_API_TIMEOUT", "0")
    monkeypatch.setattr(fetch, "fetch_document", fake_fetch)
    argv = ["--output", str(sandbox / "out"), "scrape"]
    assert scrape_api.main(argv) == scrape_api.EXIT_OK
    assert timeouts == [fetch.DEFAULT_TIMEOUT]
