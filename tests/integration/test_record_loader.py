from __future__ import annotations

import json
from pathlib import Path

import pytest

from hirevelocity.pipeline import RecordLoadError, RecordLoader
from hirevelocity.schemas import Candidate, Event


def test_record_loader_raises_on_invalid_json(tmp_path: Path):
    loader = RecordLoader(Candidate)
    path = tmp_path / "candidates.jsonl"
    path.write_text('{"candidate_id": "C-1", "req_id": "R-1"}\n{invalid}', encoding="utf-8")

    with pytest.raises(RecordLoadError) as exc:
        loader.load(path)
    assert "invalid JSON" in str(exc.value)
    assert "line 2" in exc.value.errors[0]


def test_record_loader_skips_invalid_and_reports(tmp_path: Path):
    loader = RecordLoader(Event)
    path = tmp_path / "events.jsonl"
    valid_payload = {
        "req_id": "R-1",
        "candidate_id": "C-1",
        "event_type": "INTERVIEW_COMPLETED",
        "event_at": "2024-01-05T10:00:00Z",
    }
    invalid_payload = {"req_id": "R-1", "candidate_id": "C-1", "event_type": "TELEPORTED"}
    path.write_text(
        json.dumps(valid_payload) + "\n\n" + json.dumps(invalid_payload),
        encoding="utf-8",
    )

    with pytest.raises(RecordLoadError) as exc:
        loader.load(path)
    error = exc.value
    assert len(error.errors) == 1
    assert "invalid event" in error.errors[0]
    assert "event_type" in error.errors[0]
    assert len(error.partial) == 1
    assert error.partial[0].candidate_id == "C-1"


def test_record_loader_keeps_unknown_columns(tmp_path: Path):
    path = tmp_path / "candidates.jsonl"
    path.write_text(
        json.dumps({"candidate_id": "C-1", "req_id": "R-1", "custom_flag": True}),
        encoding="utf-8",
    )

    [candidate] = RecordLoader(Candidate).load(path)

    assert candidate.custom_flag is True
