"""Batch pipeline: load canonical records, run the engine, persist results."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Generic, TypeVar

import pendulum
import structlog
from pydantic import BaseModel, ValidationError

from .core import VelocityEngine, VelocityMetrics
from .schemas import Candidate, Event, FilterSpec, Requisition, User
from . import __version__

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordLoadError(ValueError):
    """Raised when a record file contains invalid lines."""

    def __init__(self, errors: list[str], partial: list[Any]):
        super().__init__("Record loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Record loading failed: {self.errors}"


class RecordLoader(Generic[RecordT]):
    """Load one canonical entity type from a JSON-lines file."""

    def __init__(self, model: type[RecordT]):
        self._model = model

    @property
    def kind(self) -> str:
        return self._model.__name__.lower()

    def load(self, path: Path) -> list[RecordT]:
        records: list[RecordT] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    payload = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"{path.name} line {idx}: invalid JSON ({exc})")
                    continue
                try:
                    records.append(self._model.model_validate(payload))
                except ValidationError as exc:
                    errors.append(
                        f"{path.name} line {idx}: invalid {self.kind} "
                        f"({exc.error_count()} errors: {_summarize(exc)})"
                    )
        if errors:
            raise RecordLoadError(errors, records)
        return records


class OutputWriter:
    """Persist velocity results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


class VelocityPipeline:
    """End-to-end velocity analysis over JSON-lines exports."""

    def __init__(
        self,
        *,
        engine: VelocityEngine,
        default_filters: FilterSpec | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._default_filters = default_filters
        self._loaders: dict[str, RecordLoader[Any]] = {
            "candidates": RecordLoader(Candidate),
            "requisitions": RecordLoader(Requisition),
            "events": RecordLoader(Event),
            "users": RecordLoader(User),
        }
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        candidates_path: Path,
        requisitions_path: Path,
        events_path: Path,
        output_path: Path,
        users_path: Path | None = None,
        filters: FilterSpec | None = None,
        as_of: str | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> dict:
        load_errors: list[str] = []
        candidates = self._load("candidates", candidates_path, load_errors)
        requisitions = self._load("requisitions", requisitions_path, load_errors)
        events = self._load("events", events_path, load_errors)
        users = self._load("users", users_path, load_errors) if users_path else []

        active_filters = filters if filters is not None else self._default_filters
        metrics = self._engine.calculate(
            candidates=candidates,
            requisitions=requisitions,
            events=events,
            users=users,
            filters=active_filters,
            as_of=as_of,
        )
        result = serialize_metrics(metrics)

        summary = {
            "total_offers": metrics.candidate_decay.total_offers,
            "total_reqs": metrics.req_decay.total_reqs,
            "has_cohort_comparison": metrics.cohort_comparison is not None,
            "insight_count": len(metrics.insights),
        }
        self._logger.info("velocity.result", **summary)

        metadata = {
            "counts": {
                "candidates": len(candidates),
                "requisitions": len(requisitions),
                "events": len(events),
                "users": len(users),
            },
            "filters": (
                active_filters.model_dump(mode="json", exclude_none=True)
                if active_filters
                else {}
            ),
            "as_of": as_of,
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }

        if audit_logger:
            audit_logger.append({**summary, **metadata})

        self._writer.write(output_path, {"metadata": metadata, "result": result})
        return result

    def _load(self, kind: str, path: Path, errors: list[str]) -> list[Any]:
        try:
            return self._loaders[kind].load(path)
        except RecordLoadError as exc:
            errors.extend(exc.errors)
            self._logger.warning("records.partial_load", kind=kind, errors=exc.errors)
            return exc.partial


def serialize_metrics(metrics: VelocityMetrics) -> dict:
    """Render a result as plain JSON-compatible data."""
    rendered = asdict(metrics)
    if metrics.cohort_comparison is not None:
        factors = metrics.cohort_comparison.factors
        for factor, raw in zip(factors, rendered["cohort_comparison"]["factors"]):
            raw["display"] = {
                "fast": factor.fast_display,
                "slow": factor.slow_display,
                "delta": factor.delta_display,
            }
    return json.loads(json.dumps(rendered, default=_json_default, ensure_ascii=False))


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
