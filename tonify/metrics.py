from prometheus_client import Counter, Histogram


REQUESTS = Counter("tonify_requests_total", "Total relay requests", ["endpoint"])
UPSTREAM_FAILURES = Counter(
    "tonify_upstream_failures_total", "Relay requests that ended in an upstream error", ["endpoint"]
)
LATENCY = Histogram(
    "tonify_request_latency_seconds",
    "Request latency",
    buckets=(0.05, 0.1, 0.2, 0.5, 1, 2, 5, 10)
)
