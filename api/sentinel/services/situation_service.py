"""Situation analysis entry point: text -> CompositionDocument.

Two providers implement the same async contract: the local deterministic
analyzer + response library, and a remote HTTP provider. The provider is
chosen from explicit settings at construction time.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional, Protocol

from sentinel.models.composition import CompositionDocument
from sentinel.services import response_library, situation_analyzer
from sentinel.services.remote_provider_client import RemoteSituationProvider, SituationProviderError
from sentinel.services.sentinel_config import ProviderKind, SentinelSettings

log = logging.getLogger(__name__)


class SituationProvider(Protocol):
    async def analyze_situation(self, text: str) -> CompositionDocument:
        ...


class LocalSituationProvider:
    """Analyzer + response library behind a simulated model latency."""

    def __init__(
        self,
        latency_ms_min: float = 300.0,
        latency_ms_max: float = 800.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._latency_ms_min = max(0.0, latency_ms_min)
        self._latency_ms_max = max(self._latency_ms_min, latency_ms_max)
        self._rng = rng or random.Random()

    def _delay_seconds(self) -> float:
        if self._latency_ms_max <= 0:
            return 0.0
        return self._rng.uniform(self._latency_ms_min, self._latency_ms_max) / 1000.0

    async def analyze_situation(self, text: str) -> CompositionDocument:
        delay = self._delay_seconds()
        if delay > 0:
            await asyncio.sleep(delay)
        return synthesize_situation(text)


def synthesize_situation(text: str) -> CompositionDocument:
    """Synchronous analyze + synthesize with no simulated latency."""
    analysis = situation_analyzer.analyze(text)
    document = response_library.synthesize(analysis.intent, analysis.urgency, analysis.confidence)
    log.info(
        "situation_analyzed intent=%s urgency=%s analyzer_confidence=%.3f confidence=%.3f layout=%s",
        analysis.intent.value,
        analysis.urgency.value,
        analysis.confidence,
        document.confidence,
        getattr(document.layout, "value", document.layout),
    )
    return document


def build_provider(settings: SentinelSettings) -> SituationProvider:
    if settings.provider == ProviderKind.REMOTE:
        return RemoteSituationProvider(
            url=settings.remote_url,
            api_key=settings.remote_api_key,
            timeout_s=settings.remote_timeout_s,
        )
    return LocalSituationProvider(
        latency_ms_min=settings.latency_ms_min,
        latency_ms_max=settings.latency_ms_max,
    )


async def analyze_situation(text: str, provider: Optional[SituationProvider] = None) -> CompositionDocument:
    """The single external entry point."""
    provider = provider or build_provider(SentinelSettings.from_env())
    return await provider.analyze_situation(text)


class SituationSession:
    """Holds the currently displayed composition for one caller.

    Each submit() takes a new generation number. A result or failure that arrives
    after a newer submission has started is discarded and submit() returns None.
    A failing latest submission records last_error and re-raises; the last good
    document stays current.
    """

    def __init__(self, provider: SituationProvider) -> None:
        self._provider = provider
        self._generation = 0
        self.current: Optional[CompositionDocument] = None
        self.last_error: Optional[Exception] = None

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(self, text: str) -> Optional[CompositionDocument]:
        self._generation += 1
        generation = self._generation
        try:
            document = await self._provider.analyze_situation(text)
        except (SituationProviderError, ValueError) as exc:
            if generation != self._generation:
                log.info(
                    "situation_failure_discarded generation=%s latest=%s error=%s", generation, self._generation, exc
                )
                return None
            self.last_error = exc
            log.warning("situation_submit_failed generation=%s error=%s", generation, exc)
            raise
        if generation != self._generation:
            log.info("situation_result_discarded generation=%s latest=%s", generation, self._generation)
            return None
        self.current = document
        self.last_error = None
        return document
