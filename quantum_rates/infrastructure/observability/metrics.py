"""Prometheus metrics for monitoring simulations, tier changes, and repository performance"""

from prometheus_client import Counter, Histogram

# Simulation metrics
simulation_counter = Counter(
    "quantum_simulation_total",
    "Total investment simulations requested",
    ["outcome"],  # resolved | rejected
)

simulation_term_bucket_counter = Counter(
    "quantum_simulation_term_bucket",
    "Resolved simulations by term band",
    ["bucket"],  # <=30d, 31-90d, 91-180d, 181-360d, 360d+
)

# Tier administration metrics
tier_mutation_counter = Counter(
    "quantum_tier_mutation_total",
    "Rate tier create/update/delete attempts",
    ["operation", "outcome"],  # outcome: ok | invalid | failed
)

# Rate Tier Repository metrics
repository_latency_histogram = Histogram(
    "rate_tier_repository_latency_seconds",
    "Rate Tier Repository response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

repository_failure_counter = Counter(
    "rate_tier_repository_failures_total",
    "Failed Rate Tier Repository calls",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(resolved: bool, term_days: int | None = None) -> None:
    """Record simulation outcome and, for resolved ones, the term band"""
    simulation_counter.labels(outcome="resolved" if resolved else "rejected").inc()
    if not resolved or term_days is None:
        return

    if term_days <= 30:
        bucket = "<=30d"
    elif term_days <= 90:
        bucket = "31-90d"
    elif term_days <= 180:
        bucket = "91-180d"
    elif term_days <= 360:
        bucket = "181-360d"
    else:
        bucket = "360d+"

    simulation_term_bucket_counter.labels(bucket=bucket).inc()


def record_tier_mutation(operation: str, outcome: str) -> None:
    tier_mutation_counter.labels(operation=operation, outcome=outcome).inc()
