from __future__ import annotations

import json
from pathlib import Path

import pytest

from staffreq.container import create_container
from staffreq.pipeline import ApplicationLoader, ApplicationLoadError, SnapshotLoader
from staffreq.repositories import MemoryDatabase


def test_application_loader_collects_line_errors(tmp_path: Path):
    path = tmp_path / "applications.jsonl"
    path.write_text(
        "\n".join(
            [
                json.dumps({"candidate_id": "C-1", "requisition_id": "REQ-1", "answers": {"health_card": "yes"}}),
                "",
                json.dumps({"candidate_id": "C-2"}),
                json.dumps(["not", "an", "object"]),
                json.dumps({"candidate_id": "C-3", "requisition_id": "REQ-1", "answers": "yes"}),
            ]
        ),
        encoding="utf-8",
    )

    with pytest.raises(ApplicationLoadError) as excinfo:
        ApplicationLoader().load(path)

    assert [request.candidate_id for request in excinfo.value.partial] == ["C-1"]
    assert excinfo.value.partial[0].line == 1
    assert excinfo.value.errors == [
        "line 3: missing requisition_id",
        "line 4: expected an object",
        "line 5: answers must be an object",
    ]


def test_snapshot_loader_rejects_invalid_documents(tmp_path: Path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps({"requisitions": [{"id": "REQ-1", "brand_id": "b", "store_id": "s", "position": "x", "modality": "Full-Time", "seat_count": 40, "shift": "Night"}]}),
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Invalid requisitions"):
        SnapshotLoader().load(path, MemoryDatabase())


def test_pipeline_writes_metadata_without_applications(tmp_path: Path):
    snapshot_path = tmp_path / "snapshot.json"
    applications_path = tmp_path / "applications.jsonl"
    output_path = tmp_path / "routing.json"
    snapshot_path.write_text(json.dumps({"stores": [{"id": "S-1", "brand_id": "marca_kfc"}]}), encoding="utf-8")
    applications_path.write_text("", encoding="utf-8")

    container = create_container()
    results = container.pipeline().run(
        snapshot_path=snapshot_path,
        applications_path=applications_path,
        output_path=output_path,
    )

    assert results == []
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["results"] == []
    assert rendered["metadata"]["snapshot"]["stores"] == 1
    assert rendered["metadata"]["errors"] == []
    assert container.store_directory().get("S-1").brand_id == "marca_kfc"
