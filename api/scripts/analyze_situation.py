#!/usr/bin/env python3
"""Analyze a situation description and print the composition and placement plan."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path

_API_DIR = Path(__file__).resolve().parents[1]
if str(_API_DIR) not in sys.path:
    sys.path.insert(0, str(_API_DIR))

from sentinel.services import composition_engine, situation_analyzer  # noqa: E402
from sentinel.services.remote_provider_client import SituationProviderError  # noqa: E402
from sentinel.services.sentinel_config import ProviderKind, SentinelSettings  # noqa: E402
from sentinel.services.situation_service import build_provider  # noqa: E402


def _classification(settings: SentinelSettings, text: str, document) -> dict:
    """Local runs report the analyzer result; remote runs report what the provider reasoned."""
    if settings.provider == ProviderKind.LOCAL:
        analysis = situation_analyzer.analyze(text)
        return {
            "source": "analyzer",
            "intent": analysis.intent.value,
            "urgency": analysis.urgency.value,
            "confidence": analysis.confidence,
            "keywords": analysis.keywords,
        }
    return {
        "source": "provider",
        "intent": document.reasoning.intent.value,
        "urgency": document.reasoning.urgency.value,
        "confidence": document.confidence,
        "keywords": [],
    }


def _print_plan(plan) -> None:
    print(f"layout={plan.layout.value} requested={plan.requested_layout} "
          f"confidence={plan.confidence_percent}% band={plan.confidence_band.value}")
    for cell in plan.cells:
        print(f"  [{cell.order:02d}] {cell.region.value:<7} {cell.width.value:<7} "
              f"p{cell.priority} {cell.type.value:<20} {cell.id} delay={cell.animation_delay_ms}ms")
    if plan.skipped:
        print(f"  skipped: {', '.join(plan.skipped)}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Turn a situation description into a UI composition")
    parser.add_argument("situation", nargs="*", help="Situation text (reads stdin when omitted)")
    parser.add_argument("--json", action="store_true", help="Output JSON report")
    parser.add_argument("--plan-only", action="store_true", help="Only print the placement plan")
    parser.add_argument("--no-delay", action="store_true", help="Skip the simulated analysis latency")
    args = parser.parse_args()

    text = " ".join(args.situation) if args.situation else sys.stdin.read()
    try:
        settings = SentinelSettings.from_env()
    except ValueError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2
    if args.no_delay:
        settings = dataclasses.replace(settings, latency_ms_min=0.0, latency_ms_max=0.0)

    try:
        document = asyncio.run(build_provider(settings).analyze_situation(text))
    except (SituationProviderError, ValueError) as exc:
        print(f"analysis failed: {exc}", file=sys.stderr)
        return 1
    plan = composition_engine.compose(document)
    classification = _classification(settings, text, document)

    if args.json:
        payload = {"plan": plan.model_dump(mode="json", by_alias=True)}
        if not args.plan_only:
            payload["analysis"] = classification
            payload["document"] = document.model_dump(mode="json", by_alias=True)
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    if not args.plan_only:
        print(f"[{classification['source']}] intent={classification['intent']} "
              f"urgency={classification['urgency']} confidence={classification['confidence']:.2f} "
              f"keywords={','.join(classification['keywords'])}")
        print(document.explanation)
        for area in document.reasoning.uncertainty_areas:
            print(f"  uncertain: {area}")
        for hidden in document.reasoning.hidden_components:
            print(f"  hidden {hidden.type.value}: {hidden.reason}")
    _print_plan(plan)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
