# === NAVMAP v1 ===
# {
#   "module": "tests.conftest",
#   "purpose": "Shared pytest fixtures for the submission flow test suite",
#   "sections": [
#     {"id": "globals", "name": "Globals", "anchor": "GLB", "kind": "infra"},
#     {"id": "fixtures", "name": "Fixtures", "anchor": "FIX", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Shared pytest fixtures for the submission flow test suite.

Entity managers are exercised against :class:`MemoryGraphStore`, which runs
the generated SPARQL on an rdflib dataset. Tests stay plain synchronous
functions and drive coroutines with :func:`asyncio.run`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

# --- Globals ---

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from SubmissionFlow.memory_store import MemoryGraphStore  # noqa: E402
from SubmissionFlow.settings import StoreSettings, reset_settings_cache  # noqa: E402

# --- Fixtures ---


@pytest.fixture
def store() -> MemoryGraphStore:
    """Empty in-memory graph store."""
    return MemoryGraphStore()


@pytest.fixture
def share_settings(tmp_path: Path) -> StoreSettings:
    """Settings whose share directory is a temporary directory."""
    share = tmp_path / "share"
    share.mkdir()
    return StoreSettings(share_directory=f"{share}/")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep cached settings and ``SUBMISSION_FLOW_*`` variables out of tests."""
    for key in list(os.environ):
        if key.startswith("SUBMISSION_FLOW_") or key == "MU_SPARQL_ENDPOINT":
            monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()
