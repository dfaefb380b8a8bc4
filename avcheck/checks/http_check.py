from __future__ import annotations

import time
from dataclasses import dataclass

import requests


@dataclass
class HttpOutcome:
    reached: bool
    latency_ms: int
    status_code: int | None = None
    error: str | None = None


def run_http(url: str, timeout_s: float) -> HttpOutcome:
    """GET ``url`` once; ``reached`` means any HTTP response came back."""
    start = time.perf_counter()
    try:
        r = requests.get(url, timeout=timeout_s)
        latency_ms = int((time.perf_counter() - start) * 1000)
        return HttpOutcome(reached=True, latency_ms=latency_ms, status_code=r.status_code)
    except requests.RequestException as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        return HttpOutcome(reached=False, latency_ms=latency_ms, error=str(e))
