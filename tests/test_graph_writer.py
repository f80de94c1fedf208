"""Tests for writing the exported graph."""
import json

import pytest

from brain_graph.exceptions import ErrorCode, ExportError
from brain_graph.models.schema import Note, NoteLink
from brain_graph.services.graph_builder import assemble_graph
from brain_graph.storage.graph_writer import write_graph


@pytest.fixture
def graph():
    notes = [
        Note(
            id="20240101100000",
            title="Foo",
            type="devops",
            tags=["DevOps"],
            path="tech/Foo.md",
            content="See [Bar](#n-20240101100001)",
            links=[NoteLink(target_id="20240101100001", display_text="Bar")],
        ),
        Note(
            id="20240101100001",
            title="Bar",
            type="note",
            path="Bar.md",
            backlinks=["Foo"],
        ),
    ]
    return assemble_graph(notes, ["me"], generated_at="2024-01-01T00:00:00+00:00")


def test_writes_camel_case_json(graph, tmp_path):
    out = write_graph(graph, tmp_path / "dist" / "brain.json")
    data = json.loads(out.read_text(encoding="utf-8"))

    assert data["metadata"] == {
        "generatedAt": "2024-01-01T00:00:00+00:00",
        "noteCount": 2,
        "excludedFolders": ["me"],
    }
    assert data["noteIndex"] == [
        {"id": "20240101100000", "title": "Foo"},
        {"id": "20240101100001", "title": "Bar"},
    ]
    assert data["notes"][0]["links"] == [
        {"targetId": "20240101100001", "displayText": "Bar"}
    ]
    assert data["notes"][1]["backlinks"] == ["Foo"]


def test_replaces_previous_export(graph, tmp_path):
    target = tmp_path / "brain.json"
    target.write_text("stale")
    write_graph(graph, target)

    assert json.loads(target.read_text())["metadata"]["noteCount"] == 2
    assert not (tmp_path / "brain.json.tmp").exists()


def test_unwritable_destination_raises(graph, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")

    with pytest.raises(ExportError) as exc_info:
        write_graph(graph, blocker / "brain.json")
    assert exc_info.value.code == ErrorCode.OUTPUT_WRITE_FAILED
    assert exc_info.value.path == str(blocker / "brain.json")
