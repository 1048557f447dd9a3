"""Remote situation provider: an HTTP service that returns composition documents.

The remote side must satisfy the same document contract as the local
synthesizer. Every response is validated; nothing is repaired.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from sentinel.models.composition import CompositionDocument, validate_document

log = logging.getLogger(__name__)


class SituationProviderError(RuntimeError):
    pass


class RemoteProviderError(SituationProviderError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteSituationProvider:
    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout_s: float = 20.0,
        user_agent: str = "sentinel-composer/1.0",
    ) -> None:
        if not url.strip():
            raise ValueError("remote provider url is empty")
        self._url = url.strip()
        self._timeout_s = timeout_s
        self._headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"

    @property
    def url(self) -> str:
        return self._url

    async def analyze_situation(self, text: str) -> CompositionDocument:
        payload: dict[str, Any] = {"situation": text}
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self._timeout_s, headers=self._headers) as client:
                resp = await client.post(self._url, json=payload)
        except httpx.HTTPError as exc:
            raise RemoteProviderError(f"remote provider request failed: {exc.__class__.__name__}: {exc}") from exc
        elapsed_ms = int(round((time.perf_counter() - started) * 1000))

        status = int(resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            body_preview = (resp.text or "")[:500]
            raise RemoteProviderError(
                f"remote provider response was not JSON (status={status}): {body_preview}",
                status_code=status,
            )

        if status >= 400:
            err = data.get("detail") or data.get("error") if isinstance(data, dict) else None
            raise RemoteProviderError(f"remote provider error (status={status}): {err or data}", status_code=status)

        # Providers may wrap the document as {"document": {...}}.
        if isinstance(data, dict) and isinstance(data.get("document"), dict):
            data = data["document"]

        document = validate_document(data)
        log.info(
            "remote_situation_analyzed status=%s elapsed_ms=%s intent=%s layout=%s components=%s",
            status,
            elapsed_ms,
            document.reasoning.intent.value,
            getattr(document.layout, "value", document.layout),
            len(document.components),
        )
        return document
