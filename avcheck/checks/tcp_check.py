from __future__ import annotations

import socket
import time
from dataclasses import dataclass


@dataclass
class TcpOutcome:
    port: int
    connected: bool
    latency_ms: int
    error: str | None = None


def run_tcp(host: str, port: int, timeout_s: float) -> TcpOutcome:
    start = time.perf_counter()
    try:
        with socket.create_connection((host, port), timeout=timeout_s):
            latency_ms = int((time.perf_counter() - start) * 1000)
            return TcpOutcome(port=port, connected=True, latency_ms=latency_ms)
    except OSError as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        return TcpOutcome(port=port, connected=False, latency_ms=latency_ms, error=str(e))


def scan_ports(host: str, ports: list[int], timeout_s: float) -> list[TcpOutcome]:
    return [run_tcp(host, port, timeout_s=timeout_s) for port in ports]
