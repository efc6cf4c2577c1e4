"""Prometheus metrics for generation and itinerary edits."""

from prometheus_client import Counter, Histogram

# Generation metrics
generation_latency_ms = Histogram(
    "generation_latency_ms",
    "Itinerary generation latency in milliseconds",
    ["provider", "outcome"],
    buckets=[100, 500, 1000, 2000, 5000, 10000, 20000, 40000, 60000],
)

generation_errors_total = Counter(
    "generation_errors_total",
    "Total itinerary generation failures",
    ["provider", "reason"],
)

# Store metrics
store_mutations_total = Counter(
    "store_mutations_total",
    "Total itinerary store mutation attempts",
    ["operation", "outcome"],
)


class PrometheusTripMetrics:
    """Prometheus-based metrics implementation."""

    def record_generation(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record generation latency."""
        generation_latency_ms.labels(provider=provider, outcome=outcome).observe(latency_ms)

    def inc_generation_error(self, provider: str, reason: str) -> None:
        """Increment generation error counter."""
        generation_errors_total.labels(provider=provider, reason=reason).inc()

    def inc_mutation(self, operation: str, outcome: str) -> None:
        """Increment store mutation counter."""
        store_mutations_total.labels(operation=operation, outcome=outcome).inc()
