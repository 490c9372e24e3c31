"""Per-client Prometheus metrics for the request transport."""

from __future__ import annotations

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram


class TransportMetrics:
    """Request, retry and stream counters bound to one registry.

    Every client gets a private registry unless the caller passes one in, so
    two clients in the same process never share counters by accident.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.requests = Counter(
            "cgate_sdk_requests_total",
            "Completed request attempts",
            ["method", "outcome"],
            registry=self.registry,
        )
        self.retries = Counter(
            "cgate_sdk_retries_total",
            "Retries scheduled after a retryable failure",
            ["method"],
            registry=self.registry,
        )
        self.latency = Histogram(
            "cgate_sdk_request_latency_seconds",
            "Latency of single request attempts",
            ["method"],
            registry=self.registry,
        )
        self.skipped_frames = Counter(
            "cgate_sdk_stream_frames_skipped_total",
            "SSE data frames dropped because they were not valid JSON",
            registry=self.registry,
        )

    def record_outcome(self, method: str, outcome: str) -> None:
        self.requests.labels(method=method, outcome=outcome).inc()


__all__ = ["TransportMetrics"]
