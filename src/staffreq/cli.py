"""Typer CLI entrypoint for store matching and application routing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pydantic
import typer

from .config import load_settings
from .container import create_container
from .core import format_distance
from .errors import StaffingError
from .logging import configure_logging
from .pipeline import AuditLogger, OutputWriter
from .schemas import Shift, Store

app = typer.Typer(help="Requisition lifecycle and candidate routing CLI.")


def _settings(config: Optional[Path]) -> dict[str, Any]:
    try:
        return load_settings(config)
    except pydantic.ValidationError as exc:
        raise typer.BadParameter(f"Invalid config file: {exc}", param_name="config") from exc


def _load_stores(path: Path) -> list[Store]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("stores", [])
    if not isinstance(data, list):
        raise typer.BadParameter("Stores file must hold a list of stores", param_name="stores")
    try:
        return [Store.model_validate(item) for item in data]
    except pydantic.ValidationError as exc:
        raise typer.BadParameter(f"Invalid store record: {exc}", param_name="stores") from exc


@app.command()
def match(
    stores: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Stores JSON path."),
    lat: float = typer.Option(..., help="Candidate latitude."),
    lng: float = typer.Option(..., help="Candidate longitude."),
    shift: Shift = typer.Option(Shift.MORNING, help="Shift the candidate applies for."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write matches to this JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Rank stores by commute distance for one candidate location."""
    settings = _settings(config)
    configure_logging(log_level)

    container = create_container(settings=settings)
    service = container.service()
    try:
        matches = service.match_candidate_to_stores((lat, lng), _load_stores(stores), shift)
    except StaffingError as exc:
        raise typer.BadParameter(str(exc)) from exc

    rows = [
        {
            "store_id": item.store.id,
            "store_name": item.store.name,
            "distance_km": item.distance_km,
            "distance": format_distance(item.distance_km) if item.distance_km is not None else None,
            "category": item.category.value,
            "eligible": item.eligible,
            "max_distance_km": item.max_distance_km,
            "relevance": item.relevance.value,
            "zone": item.zone,
        }
        for item in matches
    ]
    if output:
        OutputWriter().write(output, rows)
        typer.echo(f"Ranked {len(rows)} stores. Results saved to {output}.")
        return
    for row in rows:
        marker = "*" if row["eligible"] else " "
        typer.echo(f"{marker} {row['store_id']}\t{row['distance'] or 'n/a'}\t{row['category']}")


@app.command()
def route(
    snapshot: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Snapshot JSON path."),
    applications: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Applications JSONL path."
    ),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Route submitted applications into Flow A or Flow B."""
    settings = _settings(config)
    configure_logging(log_level)

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    try:
        results = pipeline.run(
            snapshot_path=snapshot,
            applications_path=applications,
            output_path=output,
            audit_logger=audit_logger,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name="snapshot") from exc
    typer.echo(f"Routed {len(results)} applications. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
