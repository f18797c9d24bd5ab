"""Batch routing of applications against a document-store snapshot."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pendulum
import pydantic
import structlog

from . import __version__
from .errors import StaffingError
from .repositories import MemoryDatabase
from .schemas import Approver, Candidate, Requisition, Store
from .service import RequisitionService


@dataclass(slots=True)
class ApplicationRequest:
    line: int
    candidate_id: str
    requisition_id: str
    answers: dict[str, Any] = field(default_factory=dict)


class ApplicationLoadError(ValueError):
    """Raised when application loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[ApplicationRequest]):
        super().__init__("Application loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Application loading failed: {self.errors}"


class SnapshotLoader:
    """Seed an in-memory database from a JSON export of the document store."""

    _COLLECTIONS: dict[str, type[pydantic.BaseModel]] = {
        "stores": Store,
        "candidates": Candidate,
        "approvers": Approver,
        "requisitions": Requisition,
    }

    def load(self, path: Path, database: MemoryDatabase) -> dict[str, int]:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid snapshot JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object")

        parsed: dict[str, list[Any]] = {}
        for name, model in self._COLLECTIONS.items():
            try:
                parsed[name] = [model.model_validate(item) for item in data.get(name, [])]
            except pydantic.ValidationError as exc:
                raise ValueError(f"Invalid {name} in snapshot: {exc}") from exc

        database.load(**parsed)
        return {name: len(items) for name, items in parsed.items()}


class ApplicationLoader:
    """Read application submissions from JSONL."""

    def load(self, path: Path) -> list[ApplicationRequest]:
        requests: list[ApplicationRequest] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected an object")
                    continue
                missing = [key for key in ("candidate_id", "requisition_id") if not record.get(key)]
                if missing:
                    errors.append(f"line {idx}: missing {', '.join(missing)}")
                    continue
                answers = record.get("answers") or {}
                if not isinstance(answers, dict):
                    errors.append(f"line {idx}: answers must be an object")
                    continue
                requests.append(
                    ApplicationRequest(
                        line=idx,
                        candidate_id=str(record["candidate_id"]),
                        requisition_id=str(record["requisition_id"]),
                        answers=answers,
                    )
                )
        if errors:
            raise ApplicationLoadError(errors, requests)
        return requests


class OutputWriter:
    """Persist routing outcomes."""

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


class RoutingPipeline:
    """Load a snapshot, route every application and write the decisions."""

    def __init__(
        self,
        *,
        service: RequisitionService,
        database: MemoryDatabase,
        snapshot_loader: SnapshotLoader | None = None,
        application_loader: ApplicationLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._service = service
        self._database = database
        self._snapshots = snapshot_loader or SnapshotLoader()
        self._applications = application_loader or ApplicationLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        snapshot_path: Path,
        applications_path: Path,
        output_path: Path,
        audit_logger: AuditLogger | None = None,
    ) -> list[dict]:
        counts = self._snapshots.load(snapshot_path, self._database)
        errors: list[str] = []
        try:
            requests = self._applications.load(applications_path)
        except ApplicationLoadError as exc:
            requests = exc.partial
            errors.extend(exc.errors)
            self._logger.warning("applications.partial_load", errors=exc.errors)

        results: list[dict] = []
        for request in requests:
            try:
                application = self._service.submit_application(
                    request.candidate_id,
                    request.requisition_id,
                    request.answers,
                )
            except StaffingError as exc:
                errors.append(f"line {request.line}: {exc}")
                self._logger.warning(
                    "routing.failed",
                    line=request.line,
                    candidate_id=request.candidate_id,
                    requisition_id=request.requisition_id,
                    error=str(exc),
                )
                continue

            entry = application.model_dump(mode="json")
            results.append(entry)
            if audit_logger:
                audit_logger.append(
                    {
                        "application_id": application.id,
                        "candidate_id": application.candidate_id,
                        "requisition_id": application.requisition_id,
                        "flow": entry["flow"],
                        "kq_passed": application.kq_passed,
                        "match_score": application.match_score,
                        "failed_questions": application.failed_questions,
                        "review_reasons": entry["review_reasons"],
                    }
                )

        metadata = {
            "snapshot": counts,
            "application_count": len(requests),
            "routed_count": len(results),
            "errors": errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})
        return results
