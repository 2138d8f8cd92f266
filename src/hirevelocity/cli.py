"""Typer CLI entrypoint for the velocity analysis pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .core.timeutils import to_datetime
from .logging import configure_logging
from .pipeline import AuditLogger
from .schemas.config import load_config

app = typer.Typer(help="Hire velocity and decay analysis CLI.")


def _validate_as_of(value: Optional[str]) -> Optional[str]:
    if value is not None and to_datetime(value) is None:
        raise typer.BadParameter(f"Unparseable reference timestamp: {value!r}")
    return value


@app.command()
def run(
    candidates: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidates JSONL path."),
    requisitions: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Requisitions JSONL path."),
    events: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Events JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    users: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Users JSONL path."),
    as_of: Optional[str] = typer.Option(
        None,
        callback=_validate_as_of,
        help="Reference timestamp (ISO 8601) for still-open requisitions.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    log_format: str = typer.Option("json", help="Log renderer: json or console."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Run the velocity analysis pipeline."""
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise typer.BadParameter("Config file must be a YAML object", param_hint="config")
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(str(exc), param_hint="config") from exc

    configure_logging(log_level, renderer="console" if log_format == "console" else "json")

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    result = pipeline.run(
        candidates_path=candidates,
        requisitions_path=requisitions,
        events_path=events,
        users_path=users,
        output_path=output,
        as_of=as_of,
        audit_logger=audit_logger,
    )
    typer.echo(
        f"Analyzed {result['candidate_decay']['total_offers']} offers and "
        f"{result['req_decay']['total_reqs']} requisitions; "
        f"{len(result['insights'])} insights saved to {output}."
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
