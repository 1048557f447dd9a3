"""Provider configuration, read once from the environment and passed explicitly."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProviderKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


def _float_env(name: str, default: float, minimum: float = 0.0) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        return default


@dataclass(frozen=True)
class SentinelSettings:
    provider: ProviderKind = ProviderKind.LOCAL
    remote_url: str = ""
    remote_api_key: Optional[str] = None
    remote_timeout_s: float = 20.0
    latency_ms_min: float = 300.0
    latency_ms_max: float = 800.0

    @classmethod
    def from_env(cls) -> SentinelSettings:
        raw_kind = (os.getenv("SENTINEL_PROVIDER") or "local").strip().lower()
        try:
            kind = ProviderKind(raw_kind)
        except ValueError:
            raise ValueError(f"unsupported_provider:{raw_kind}")

        remote_url = (os.getenv("SENTINEL_REMOTE_URL") or "").strip()
        if kind == ProviderKind.REMOTE and not remote_url:
            raise ValueError("missing_required_env:SENTINEL_REMOTE_URL")

        latency_min = _float_env("SENTINEL_SIMULATED_LATENCY_MS_MIN", 300.0)
        latency_max = _float_env("SENTINEL_SIMULATED_LATENCY_MS_MAX", 800.0)
        return cls(
            provider=kind,
            remote_url=remote_url,
            remote_api_key=(os.getenv("SENTINEL_REMOTE_API_KEY") or "").strip() or None,
            remote_timeout_s=_float_env("SENTINEL_REMOTE_TIMEOUT_S", 20.0, minimum=1.0),
            latency_ms_min=latency_min,
            latency_ms_max=max(latency_min, latency_max),
        )
