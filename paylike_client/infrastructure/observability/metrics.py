"""Prometheus metrics for Paylike API calls"""

from prometheus_client import Counter, Histogram

request_duration_histogram = Histogram(
    "paylike_request_duration_seconds",
    "Paylike API call latency",
    ["method", "route", "status"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

request_failure_counter = Counter(
    "paylike_request_failures_total",
    "Failed Paylike API calls",
    ["kind"],  # transport | api | decode
)


def record_request(method: str, route: str, status: object, duration_seconds: float) -> None:
    """Record latency of a completed or failed call; status is "error" when no response arrived"""
    request_duration_histogram.labels(method=method, route=route, status=str(status)).observe(duration_seconds)


def record_failure(kind: str) -> None:
    request_failure_counter.labels(kind=kind).inc()
