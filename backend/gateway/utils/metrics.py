"""Prometheus metrics for upstream calls."""

from prometheus_client import Counter, Histogram

upstream_latency_ms = Histogram(
    "upstream_latency_ms",
    "Upstream call latency in milliseconds",
    ["capability", "outcome"],
    buckets=[50, 100, 200, 500, 1000, 2000, 5000, 10000],
)

upstream_errors_total = Counter(
    "upstream_errors_total",
    "Total failed upstream calls",
    ["capability", "reason"],
)

caller_rejections_total = Counter(
    "caller_rejections_total",
    "Total requests rejected before any upstream call",
    ["capability"],
)


class PrometheusUpstreamMetrics:
    """Prometheus-based upstream metrics implementation."""

    def record_latency(self, capability: str, outcome: str, latency_ms: float) -> None:
        """Record upstream call latency."""
        upstream_latency_ms.labels(capability=capability, outcome=outcome).observe(latency_ms)

    def inc_error(self, capability: str, reason: str) -> None:
        """Increment error counter."""
        upstream_errors_total.labels(capability=capability, reason=reason).inc()

    def inc_rejection(self, capability: str) -> None:
        """Increment caller rejection counter."""
        caller_rejections_total.labels(capability=capability).inc()
