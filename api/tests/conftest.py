"""Pytest configuration and fixtures.

Async tests run on the ``pytest-asyncio`` plugin. The app is imported with the
local provider and zero simulated latency so API tests stay fast and
deterministic.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["SENTINEL_PROVIDER"] = "local"
os.environ["SENTINEL_SIMULATED_LATENCY_MS_MIN"] = "0"
os.environ["SENTINEL_SIMULATED_LATENCY_MS_MAX"] = "0"
for _key in ("SENTINEL_REMOTE_URL", "SENTINEL_REMOTE_API_KEY"):
    os.environ.pop(_key, None)


@pytest.fixture(autouse=True)
def _local_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Tests that exercise the remote provider set these explicitly.
    monkeypatch.setenv("SENTINEL_PROVIDER", "local")
    monkeypatch.setenv("SENTINEL_SIMULATED_LATENCY_MS_MIN", "0")
    monkeypatch.setenv("SENTINEL_SIMULATED_LATENCY_MS_MAX", "0")
    monkeypatch.delenv("SENTINEL_REMOTE_URL", raising=False)
    monkeypatch.delenv("SENTINEL_REMOTE_API_KEY", raising=False)


def _entry(entry_id: str, priority: int, visibility: str = "visible", component_type: str = "MetricCard") -> dict:
    props_by_type = {
        "MetricCard": {"title": f"Metric {entry_id}", "value": 1},
        "StatusBanner": {"status": "healthy", "title": "t", "message": "m", "timestamp": "now"},
        "GeoMap": {"title": "Map", "points": [{"id": "g1", "label": "US", "x": 10, "y": 20, "status": "normal"}]},
        "RecommendationStrip": {"recommendations": []},
        "LogViewer": {"logs": []},
    }
    return {
        "id": entry_id,
        "type": component_type,
        "priority": priority,
        "visibility": visibility,
        "props": props_by_type[component_type],
    }


@pytest.fixture
def make_entry():
    """Build a minimal valid component entry payload."""
    return _entry


@pytest.fixture
def make_document():
    """Build a minimal valid composition document payload."""

    def _build(components: list[dict], layout: str = "grid", confidence: float = 0.7) -> dict:
        return {
            "layout": layout,
            "components": components,
            "confidence": confidence,
            "explanation": "Test composition.",
            "reasoning": {
                "intent": "overview",
                "urgency": "low",
                "uncertaintyAreas": [],
                "hiddenComponents": [],
            },
        }

    return _build
