"""Prometheus metrics for the arena server.

Provides /metrics endpoint with Prometheus text format.
Implements simple text format without prometheus_client dependency.

Metrics exported:
- arena_http_request_duration_seconds: Request latency histogram
- arena_http_requests_total: Request count by endpoint/status
- arena_active_connections: Currently active connections
- arena_store_up: 1 if the backing store answers a ping
"""

from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

# Histogram bucket boundaries (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

METRICS_PATHS = frozenset({"/metrics", "/api/v1/metrics"})


@dataclass
class HistogramData:
    """Histogram metric data."""

    buckets: dict[float, int] = field(default_factory=lambda: defaultdict(int))
    sum: float = 0.0
    count: int = 0

    def observe(self, value: float) -> None:
        self.sum += value
        self.count += 1
        # Buckets hold per-interval counts; format_prometheus accumulates them
        for bucket in LATENCY_BUCKETS:
            if value <= bucket:
                self.buckets[bucket] += 1
                break


class MetricsCollector:
    """Thread-safe metrics collector."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._request_counts: dict[tuple[str, str, int], int] = defaultdict(int)
        self._latency_histograms: dict[tuple[str, str], HistogramData] = defaultdict(HistogramData)
        self._active_connections: int = 0

    def record_request(self, method: str, path: str, status_code: int, duration_seconds: float) -> None:
        normalized_path = self._normalize_path(path)
        with self._lock:
            self._request_counts[(method, normalized_path, status_code)] += 1
            self._latency_histograms[(method, normalized_path)].observe(duration_seconds)

    def _normalize_path(self, path: str) -> str:
        """Replace UUID segments with ``{id}`` to bound label cardinality.

        User ids are free-form names, so only the opaque UUID ids of claims,
        invitations and debates can be recognized.
        """
        parts = path.split("/")
        normalized = []
        for part in parts:
            if len(part) == 36 and part.count("-") == 4:
                normalized.append("{id}")
            else:
                normalized.append(part)
        return "/".join(normalized)

    def increment_connections(self) -> None:
        with self._lock:
            self._active_connections += 1

    def decrement_connections(self) -> None:
        with self._lock:
            self._active_connections = max(0, self._active_connections - 1)

    def get_active_connections(self) -> int:
        with self._lock:
            return self._active_connections

    def request_count(self, method: str, path: str, status_code: int) -> int:
        with self._lock:
            return self._request_counts.get((method, self._normalize_path(path), status_code), 0)

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus text format."""
        lines: list[str] = []

        with self._lock:
            lines.append("# HELP arena_http_requests_total Total HTTP requests")
            lines.append("# TYPE arena_http_requests_total counter")
            for (method, path, status), count in sorted(self._request_counts.items()):
                labels = f'method="{method}",path="{path}",status="{status}"'
                lines.append(f"arena_http_requests_total{{{labels}}} {count}")

            lines.append("")
            lines.append("# HELP arena_http_request_duration_seconds HTTP request latency")
            lines.append("# TYPE arena_http_request_duration_seconds histogram")
            for (method, path), histogram in sorted(self._latency_histograms.items()):
                base_labels = f'method="{method}",path="{path}"'
                cumulative = 0
                for bucket in LATENCY_BUCKETS:
                    cumulative += histogram.buckets.get(bucket, 0)
                    lines.append(f'arena_http_request_duration_seconds_bucket{{{base_labels},le="{bucket}"}} {cumulative}')
                lines.append(f'arena_http_request_duration_seconds_bucket{{{base_labels},le="+Inf"}} {histogram.count}')
                lines.append(f"arena_http_request_duration_seconds_sum{{{base_labels}}} {histogram.sum:.6f}")
                lines.append(f"arena_http_request_duration_seconds_count{{{base_labels}}} {histogram.count}")

            lines.append("")
            lines.append("# HELP arena_active_connections Currently active HTTP connections")
            lines.append("# TYPE arena_active_connections gauge")
            lines.append(f"arena_active_connections {self._active_connections}")

        lines.extend(self._collect_store_metrics())
        lines.append("")
        return "\n".join(lines)

    def _collect_store_metrics(self) -> list[str]:
        from ..storage import get_store

        store = get_store()
        up = 1 if store.ping() else 0
        return [
            "",
            "# HELP arena_store_up Whether the backing store answers a ping",
            "# TYPE arena_store_up gauge",
            f'arena_store_up{{backend="{store.backend_name}"}} {up}',
        ]


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


def reset_metrics_collector() -> None:
    """Reset the global collector (for testing)."""
    global _metrics_collector
    _metrics_collector = None


class MetricsMiddleware(BaseHTTPMiddleware):
    """Starlette middleware recording request count, latency and active connections."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        collector = get_metrics_collector()

        if request.url.path in METRICS_PATHS:
            return await call_next(request)

        collector.increment_connections()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            collector.record_request(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_seconds=time.perf_counter() - start_time,
            )
            return response
        except Exception:
            collector.record_request(
                method=request.method,
                path=request.url.path,
                status_code=500,
                duration_seconds=time.perf_counter() - start_time,
            )
            raise
        finally:
            collector.decrement_connections()


async def metrics_endpoint(request: Request) -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    collector = get_metrics_collector()
    return PlainTextResponse(
        content=collector.format_prometheus(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
