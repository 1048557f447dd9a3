from __future__ import annotations

import importlib.util
from pathlib import Path

from sentinel.models.composition import IntentType
from sentinel.services import response_library
from sentinel.services.sentinel_config import ProviderKind, SentinelSettings


def _load_module():
    api_root = Path(__file__).resolve().parents[1]
    script = api_root / "scripts" / "analyze_situation.py"
    spec = importlib.util.spec_from_file_location("analyze_situation", script)
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_local_run_reports_analyzer_classification() -> None:
    mod = _load_module()
    text = "Users are reporting login failures"
    document = response_library.synthesize(IntentType.INCIDENT, None, 0.94)

    summary = mod._classification(SentinelSettings(provider=ProviderKind.LOCAL), text, document)

    assert summary["source"] == "analyzer"
    assert summary["intent"] == "incident"
    assert summary["urgency"] == "high"
    assert summary["keywords"] == ["users", "reporting", "login", "failures"]


def test_remote_run_reports_provider_reasoning_not_local_analyzer() -> None:
    mod = _load_module()
    # The local analyzer would call this an incident; the provider decided otherwise.
    text = "Users are reporting login failures"
    document = response_library.synthesize(IntentType.OVERVIEW, None, 0.81)
    settings = SentinelSettings(provider=ProviderKind.REMOTE, remote_url="https://provider.test/analyze")

    summary = mod._classification(settings, text, document)

    assert summary["source"] == "provider"
    assert summary["intent"] == "overview"
    assert summary["urgency"] == document.reasoning.urgency.value
    assert summary["confidence"] == document.confidence
