import io
import json
from pathlib import Path

import pytest

from mail_boundary import cli


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def test_cli_reports_detection_from_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "mail.txt"
    source.write_text("Hello\nOn Jan 1, 2024, Jane Doe <jane@x.com> wrote:\nBody text", encoding="utf-8")

    code = cli.main([str(source)])
    payload = json.loads(capsys.readouterr().out)

    assert code == 0
    assert payload["found"] is True
    assert payload["detector"] == "reply"
    assert payload["email"]["from"] == {"name": "Jane Doe", "address": "jane@x.com"}


def test_cli_reads_stdin_and_exits_one_when_not_found(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("Nothing embedded here."))

    code = cli.main([])
    payload = json.loads(capsys.readouterr().out)

    assert code == 1
    assert payload == {"found": False, "confidence": "low"}


def test_cli_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main([str(tmp_path / "missing.txt")])
    payload = json.loads(capsys.readouterr().out)

    assert code == 2
    assert "unable to read input" in payload["error"]


def test_cli_lists_detectors(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["--detectors"])
    payload = json.loads(capsys.readouterr().out)

    assert code == 0
    assert payload["detectors"][0] == "forwarded"
    assert payload["detectors"][-1] == "reply"
