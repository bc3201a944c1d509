from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from vibeloop import cli
from vibeloop.paths import USERDATA_ENV, get_paths


def _telemetry(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_validate_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["validate"]) == 0
    assert "Content OK." in capsys.readouterr().out


def test_deck_command_lists_finale_last(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["deck", "--seed", "4"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 12
    assert "Nuclear Core" in lines[-1]


def test_play_session_reports_errors_and_logs_telemetry(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    target = tmp_path / "session.jsonl"
    monkeypatch.setattr("sys.stdin", io.StringIO("bogus\nremove 1 1\nskip\nquit\n"))
    argv = ["play", "--seed", "1", "--characters", "mechanic", "soldier", "--telemetry", str(target)]
    assert cli.main(argv) == 0
    out = capsys.readouterr().out
    assert "?" in out
    assert "WrongPhase" in out
    assert "Player 2" in out

    records = _telemetry(target)
    assert records[0]["type"] == "game_started"
    assert records[0]["payload"]["players"] == ["mechanic", "soldier"]  # type: ignore[index]


def test_userdata_defaults_to_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(USERDATA_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    paths = get_paths()
    assert paths.userdata_dir == tmp_path / "userdata"
    assert (paths.data_dir / "cards.json").is_file()
    assert (paths.schema_dir / "cards.schema.json").is_file()


def test_play_logs_to_userdata_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(USERDATA_ENV, str(tmp_path / "profile"))
    monkeypatch.setattr("sys.stdin", io.StringIO("quit\n"))
    assert cli.main(["play", "--seed", "2"]) == 0

    records = _telemetry(tmp_path / "profile" / "telemetry.jsonl")
    assert [r["type"] for r in records] == ["game_started"]


@pytest.mark.parametrize("command", ["deck", "play"])
def test_unknown_character_is_reported_not_raised(
    command: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv(USERDATA_ENV, str(tmp_path))
    monkeypatch.setattr("sys.stdin", io.StringIO("quit\n"))
    assert cli.main([command, "--characters", "mechanic", "wizard"]) == 1
    assert "Unknown character type: wizard" in capsys.readouterr().out
    assert not (tmp_path / "telemetry.jsonl").exists()
