"""Tests for the command-line runner."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from gremlinsvc import cli


class _FakeConnection:
    def __init__(self, url: str, traversal_source: str, **kwargs: Any) -> None:
        self.url = url

    def close(self) -> None:
        return None


@pytest.fixture(autouse=True)
def fake_driver(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("gremlinsvc.cluster.DriverRemoteConnection", _FakeConnection)


def test_parse_parameters_decodes_json_values() -> None:
    params = cli.parse_parameters(["name=marko", "age=29", "tags=[\"a\", \"b\"]", "empty="])

    assert params == {"name": "marko", "age": 29, "tags": ["a", "b"], "empty": ""}


def test_parse_parameters_rejects_missing_separator() -> None:
    with pytest.raises(ValueError):
        cli.parse_parameters(["oops"])


def test_read_script_from_file(tmp_path: Path) -> None:
    script = tmp_path / "query.py"
    script.write_text("g.V().count().next()")

    assert cli.read_script(f"@{script}") == "g.V().count().next()"


def test_main_prints_normalized_row(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["--contact-points", "graph-1", "-p", "age=29", "age + 1"])

    out, err = capsys.readouterr()
    assert code == 0
    assert json.loads(out) == {"result": 30}
    assert "gremlin://graph-1:8182/gremlin" in err


def test_main_reads_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('contact_points = "graph-1"\nport = 8183\n')

    code = cli.main(["--config", str(config_path), "--port", "9000", "{'ok': True}"])

    out, err = capsys.readouterr()
    assert code == 0
    assert json.loads(out) == {"ok": True}
    assert "graph-1:9000" in err


def test_main_reports_failures(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["--contact-points", "graph-1", "g.V("])

    _, err = capsys.readouterr()
    assert code == 1
    assert "error:" in err


def test_main_rejects_bad_parameters() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--contact-points", "graph-1", "-p", "novalue", "1"])

    assert excinfo.value.code == 2
