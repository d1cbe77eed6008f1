"""Prometheus metrics for the HTTP surface.

Each app owns its own ``CollectorRegistry`` so several apps (tests) can live
in one process without duplicate-metric errors.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

DURATION_BUCKETS = (0.1, 0.5, 1, 2, 5)


@dataclass
class HttpMetrics:
    content_type: ClassVar[str] = CONTENT_TYPE_LATEST

    registry: CollectorRegistry = field(default_factory=CollectorRegistry)

    def __post_init__(self) -> None:
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "route", "status"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "route"],
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )

    def observe(self, method: str, route: str, status: int, duration: float) -> None:
        self.requests_total.labels(method=method, route=route, status=str(status)).inc()
        self.request_duration.labels(method=method, route=route).observe(duration)

    def render(self) -> bytes:
        return generate_latest(self.registry)
