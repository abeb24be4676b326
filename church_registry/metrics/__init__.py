# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the church registry."""
from prometheus_client import Counter, Gauge, Histogram

MEMBER_MUTATIONS = Counter(
    "member_mutations_total", "Member writes that committed", ["operation"]
)
CATEGORY_MEMBERS = Gauge(
    "category_members", "Members per ministry/department after the last recount", ["kind", "name"]
)
RECOUNT_DURATION = Histogram(
    "category_recount_duration_seconds",
    "Time spent recomputing category counts",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5],
)
RECOUNT_FAILURES = Counter(
    "recount_failures_total", "Category recounts that failed after a member write"
)
LOGIN_ATTEMPTS = Counter(
    "login_attempts_total", "Login attempts", ["outcome"]
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
