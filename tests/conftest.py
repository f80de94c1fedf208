"""Common test fixtures for the note graph builder."""

from pathlib import Path

import pytest

from brain_graph.config import BrainGraphConfig
from brain_graph.models.title_index import TitleIndex
from brain_graph.observability import metrics
from tests.vault_factory import Vault


@pytest.fixture
def vault(tmp_path):
    """An empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return Vault(root)


@pytest.fixture
def make_config(tmp_path, vault):
    """Factory for a config pointing at the test vault and a temp dist dir."""
    def _make(**overrides) -> BrainGraphConfig:
        values = {
            "base_dir": tmp_path,
            "vault_path": vault.root,
            "images_path": None,
            "excluded_folders": [],
            "output_path": tmp_path / "dist" / "brain.json",
            "images_output_dir": tmp_path / "dist" / "images",
            "images_url_prefix": "/dist/images",
            "root_tag": "Second Brain",
            "tag_line_prefix": "Tags:",
            "link_prefix": "Link:",
            "default_type": "note",
        }
        values.update(overrides)
        return BrainGraphConfig(**values)
    return _make


@pytest.fixture
def title_index():
    """A small index: Foo, DevOps, Second Brain, Excluded Note."""
    return TitleIndex.build([
        (Path("/v/Foo.md"), "20240101100000"),
        (Path("/v/tech/DevOps.md"), "20240101100001"),
        (Path("/v/Second Brain.md"), "20240101100002"),
        (Path("/v/me/Excluded Note.md"), "20240101100003"),
    ])


@pytest.fixture(autouse=True)
def _reset_metrics():
    """Keep the global metrics collector isolated between tests."""
    metrics.reset()
    yield
    metrics.reset()
