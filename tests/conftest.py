"""Shared fixtures: throwaway vaults under pytest's tmp_path."""

from pathlib import Path

import pytest

from canvas_vault import session
from canvas_vault.config import configuration_from_paths
from canvas_vault.data_models import VaultMetadata


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    path = (tmp_path / "vault").resolve()
    path.mkdir()
    return path


@pytest.fixture
def vault(vault_path: Path) -> VaultMetadata:
    return VaultMetadata(name="vault", path=vault_path, description="test vault", exists=True)


@pytest.fixture
def registered_vaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Publish a two-vault registry (``personal`` default, ``work``) for tool-level tests."""
    personal = tmp_path / "personal"
    work = tmp_path / "work"
    personal.mkdir()
    work.mkdir()
    configuration = configuration_from_paths([personal, work])
    monkeypatch.setattr(session, "_CONFIGURATION", configuration)
    return configuration


EMPTY_CANVAS = '{"nodes":[],"edges":[]}'

SAMPLE_CANVAS = """{
  "nodes": [
    {"id": "n1", "type": "text", "x": 0, "y": 0, "width": 250, "height": 60, "text": "# Plan"},
    {"id": "n2", "type": "file", "x": 300, "y": 0, "width": 400, "height": 300, "file": "notes/plan.md", "subpath": "#Goals"},
    {"id": "n3", "type": "link", "x": 0, "y": 200, "width": 200, "height": 100, "url": "https://jsoncanvas.org"},
    {"id": "g1", "type": "group", "x": -20, "y": -20, "width": 800, "height": 400, "label": "Sprint", "color": "4"}
  ],
  "edges": [
    {"id": "e1", "fromNode": "n1", "toNode": "n2", "fromSide": "right", "toSide": "left", "toEnd": "arrow", "color": "#ff8800"}
  ]
}
"""
