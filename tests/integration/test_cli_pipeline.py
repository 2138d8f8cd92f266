from __future__ import annotations

import json
from pathlib import Path

import pendulum
import pytest
from typer.testing import CliRunner

from hirevelocity.cli import app

BASE = pendulum.datetime(2024, 1, 1)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_jsonl(path: Path, rows: list[dict]) -> None:
    path.write_text(
        "\n".join(json.dumps(row, ensure_ascii=False) for row in rows),
        encoding="utf-8",
    )


@pytest.fixture
def exports(tmp_path: Path) -> dict[str, Path]:
    requisitions = []
    candidates = []
    events = []
    for idx, ttf in enumerate([10, 20, 30, 40, 50, 60]):
        req_id = f"R-{idx}"
        requisitions.append(
            {
                "req_id": req_id,
                "status": "Closed",
                "location_region": "AMER" if idx < 3 else "EMEA",
                "opened_at": BASE.to_iso8601_string(),
                "closed_at": BASE.add(days=ttf).to_iso8601_string(),
            }
        )
        offer_at = BASE.add(days=ttf - 2)
        candidates.append(
            {
                "candidate_id": f"C-{idx}",
                "req_id": req_id,
                "source": "Referral",
                "disposition": "Hired",
                "applied_at": BASE.to_iso8601_string(),
                "offer_extended_at": offer_at.to_iso8601_string(),
                "offer_accepted_at": offer_at.add(days=1).to_iso8601_string(),
            }
        )
        events.append(
            {
                "event_id": f"E-{idx}",
                "req_id": req_id,
                "candidate_id": f"C-{idx}",
                "event_type": "INTERVIEW_COMPLETED",
                "event_at": BASE.add(days=5).to_iso8601_string(),
            }
        )
    requisitions.append(
        {
            "req_id": "R-open",
            "status": "Open",
            "location_region": "AMER",
            "opened_at": BASE.to_iso8601_string(),
        }
    )

    paths = {
        "candidates": tmp_path / "candidates.jsonl",
        "requisitions": tmp_path / "requisitions.jsonl",
        "events": tmp_path / "events.jsonl",
        "users": tmp_path / "users.jsonl",
    }
    write_jsonl(paths["candidates"], candidates)
    write_jsonl(paths["requisitions"], requisitions)
    write_jsonl(paths["events"], events)
    write_jsonl(paths["users"], [{"user_id": "U-1", "name": "Avery", "role": "Recruiter"}])
    return paths


def base_args(exports: dict[str, Path], output: Path) -> list[str]:
    return [
        "--candidates",
        str(exports["candidates"]),
        "--requisitions",
        str(exports["requisitions"]),
        "--events",
        str(exports["events"]),
        "--output",
        str(output),
    ]


def test_cli_runs_pipeline_and_writes_output(
    tmp_path: Path, runner: CliRunner, exports: dict[str, Path]
) -> None:
    output_path = tmp_path / "out" / "velocity.json"
    audit_path = tmp_path / "audit.jsonl"

    result = runner.invoke(
        app,
        base_args(exports, output_path)
        + [
            "--users",
            str(exports["users"]),
            "--as-of",
            "2024-01-20",
            "--audit-log",
            str(audit_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert "Analyzed 6 offers and 6 requisitions" in result.stdout
    assert output_path.exists()

    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    metadata = rendered["metadata"]
    assert metadata["counts"] == {"candidates": 6, "requisitions": 7, "events": 6, "users": 1}
    assert metadata["as_of"] == "2024-01-20"
    assert metadata["errors"] == []

    body = rendered["result"]
    # the open requisition is only 19 days old
    assert body["req_decay"]["total_reqs"] == 6
    assert body["candidate_decay"]["total_offers"] == 6
    cohorts = body["cohort_comparison"]
    assert cohorts["fast_hires"]["count"] == 1
    ttf = next(factor for factor in cohorts["factors"] if factor["factor"] == "Avg Time to Fill")
    assert ttf["display"]["delta"] == "+50"
    assert body["insights"][-1]["title"] == "Limited Offer Data"

    audit_records = [json.loads(line) for line in audit_path.read_text(encoding="utf-8").splitlines()]
    assert len(audit_records) == 1
    assert audit_records[0]["total_offers"] == 6
    assert audit_records[0]["has_cohort_comparison"] is True


def test_cli_applies_config_filters(
    tmp_path: Path, runner: CliRunner, exports: dict[str, Path]
) -> None:
    output_path = tmp_path / "velocity.json"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "filters:\n  regions: [EMEA]\nas_of: '2024-12-31'\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, base_args(exports, output_path) + ["--config", str(config_path)])

    assert result.exit_code == 0, result.stdout
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["filters"] == {"regions": {"values": ["EMEA"], "strict": False}}
    assert rendered["result"]["req_decay"]["total_reqs"] == 3
    assert rendered["result"]["cohort_comparison"] is None


def test_cli_rejects_unknown_config_keys(
    tmp_path: Path, runner: CliRunner, exports: dict[str, Path]
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("score_weights:\n  bm25: 0.5\n", encoding="utf-8")

    result = runner.invoke(
        app, base_args(exports, tmp_path / "velocity.json") + ["--config", str(config_path)]
    )

    assert result.exit_code != 0


def test_cli_reports_partial_loads(
    tmp_path: Path, runner: CliRunner, exports: dict[str, Path]
) -> None:
    with exports["events"].open("a", encoding="utf-8") as handle:
        handle.write("\n{broken")
    output_path = tmp_path / "velocity.json"

    result = runner.invoke(app, base_args(exports, output_path) + ["--as-of", "2024-12-31"])

    assert result.exit_code == 0, result.stdout
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["counts"]["events"] == 6
    assert len(rendered["metadata"]["errors"]) == 1
    assert "invalid JSON" in rendered["metadata"]["errors"][0]


def test_cli_rejects_unparseable_reference_date(
    tmp_path: Path, runner: CliRunner, exports: dict[str, Path]
) -> None:
    output_path = tmp_path / "velocity.json"

    result = runner.invoke(app, base_args(exports, output_path) + ["--as-of", "someday"])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
    assert not output_path.exists()


def test_cli_rejects_unparseable_config_reference_date(
    tmp_path: Path, runner: CliRunner, exports: dict[str, Path]
) -> None:
    output_path = tmp_path / "velocity.json"
    config_path = tmp_path / "config.yaml"
    config_path.write_text("as_of: someday\n", encoding="utf-8")

    result = runner.invoke(app, base_args(exports, output_path) + ["--config", str(config_path)])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
    assert not output_path.exists()
