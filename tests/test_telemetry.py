"""Tests for the load outcome log."""
from __future__ import annotations

import json
from pathlib import Path

from dimhome.core.telemetry import ENV_VAR, LoadLog, LoadOutcome, LoadRecord, load_log_from_env


def test_load_record_omits_unset_fields() -> None:
    payload = LoadRecord("catalog", LoadOutcome.FAILED, 0.1234567, reason="HTTP 500").to_json()

    assert payload["loader"] == "catalog"
    assert payload["outcome"] == "failed"
    assert payload["duration"] == 0.123457
    assert payload["reason"] == "HTTP 500"
    assert "generation" not in payload
    assert "count" not in payload


def test_load_log_appends_json_lines(tmp_path: Path) -> None:
    log = LoadLog(tmp_path / "nested" / "loads.jsonl")

    log.write(LoadRecord("banner", LoadOutcome.LOADED, 0.5, generation=1, count=1))
    log.write(LoadRecord("banner", LoadOutcome.DISCARDED, 0.2, generation=2))

    lines = log.target.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["outcome"] for line in lines] == ["loaded", "discarded"]
    assert json.loads(lines[1])["generation"] == 2


def test_load_log_from_env(tmp_path: Path) -> None:
    assert load_log_from_env(environ={}) is None

    log = load_log_from_env(environ={ENV_VAR: str(tmp_path / "loads.jsonl")})

    assert log is not None
    assert log.target == tmp_path / "loads.jsonl"
