from __future__ import annotations

import argparse
import importlib.util
import json
import os
from datetime import timedelta
from pathlib import Path

import pytest

from debounce_cli.command import fingerprint
from debounce_cli.storage import MarkerPayload, MarkerStore


def _load_module():
    module_path = Path(__file__).resolve().parents[1] / "scripts" / "debounce_diag.py"
    spec = importlib.util.spec_from_file_location("debounce_diag_test_module", module_path)
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def diag_store(monkeypatch: pytest.MonkeyPatch, state_dir: Path) -> MarkerStore:
    monkeypatch.setenv("DEBOUNCE_STATE_DIR", str(state_dir))
    return MarkerStore(state_dir)


def _age(store: MarkerStore, name: str, age: timedelta) -> None:
    path = store.path_for(name)
    timestamp = path.stat().st_mtime - age.total_seconds()
    os.utime(path, (timestamp, timestamp))


def test_markers_lists_json(diag_store: MarkerStore, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()
    diag_store.write("fresh", MarkerPayload.for_command(timedelta(hours=1), ["backup", "--all"]))
    diag_store.write("stale", MarkerPayload.for_command(timedelta(seconds=1), ["rotate-logs"]))
    _age(diag_store, "stale", timedelta(minutes=5))
    (diag_store.root / "junk").write_text("???", encoding="utf-8")

    diag.cmd_markers(argparse.Namespace(json=True))

    payload = {item["fingerprint"]: item for item in json.loads(capsys.readouterr().out)}
    assert payload["fresh"]["command"] == ["backup", "--all"]
    assert payload["fresh"]["cooldown_seconds"] == 3600
    assert payload["fresh"]["expired"] is False
    assert payload["stale"]["expired"] is True
    assert "error" in payload["junk"]


def test_markers_text_output(diag_store: MarkerStore, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()
    diag_store.write("f" * 64, MarkerPayload.for_command(timedelta(hours=1), ["backup", "--all"]))

    diag.cmd_markers(argparse.Namespace(json=False))

    output = capsys.readouterr().out
    assert output.startswith("f" * 12 + " [cooling]")
    assert output.rstrip().endswith("-> backup --all")


def test_markers_on_missing_store(diag_store: MarkerStore, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()

    diag.cmd_markers(argparse.Namespace(json=True))

    assert json.loads(capsys.readouterr().out) == []


def test_forced_sweep_removes_expired(diag_store: MarkerStore, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()
    diag_store.write("stale", MarkerPayload.for_command(timedelta(seconds=1), ["rotate-logs"]))
    diag_store.write("fresh", MarkerPayload.for_command(timedelta(hours=1), ["backup"]))
    _age(diag_store, "stale", timedelta(minutes=5))

    diag.cmd_sweep(argparse.Namespace(force=True))

    report = json.loads(capsys.readouterr().out)
    assert report["removed"] == 1
    assert report["threshold"] == 0
    assert not diag_store.path_for("stale").exists()
    assert diag_store.path_for("fresh").exists()


def test_unforced_sweep_respects_threshold(diag_store: MarkerStore, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()
    diag_store.write("stale", MarkerPayload.for_command(timedelta(seconds=1), ["rotate-logs"]))
    _age(diag_store, "stale", timedelta(minutes=5))

    diag.cmd_sweep(argparse.Namespace(force=False))

    assert json.loads(capsys.readouterr().out)["removed"] == 0
    assert diag_store.path_for("stale").exists()


def test_forget_removes_marker(diag_store: MarkerStore, make_script, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()
    script = make_script("job")
    name = fingerprint([str(script), "x"])
    diag_store.write(name, MarkerPayload.for_command(timedelta(hours=1), [str(script), "x"]))

    diag.cmd_forget(argparse.Namespace(command=[str(script), "x"]))

    assert f"Forgot {name}" in capsys.readouterr().out
    assert not diag_store.path_for(name).exists()


def test_forget_unknown_command(diag_store: MarkerStore, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    diag = _load_module()

    with pytest.raises(SystemExit):
        diag.cmd_forget(argparse.Namespace(command=[str(tmp_path / "missing")]))

    assert "Cannot identify command" in capsys.readouterr().out
