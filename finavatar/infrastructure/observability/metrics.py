"""Prometheus metrics for monitoring avatar scores, habit activity, and advisor calls"""

from prometheus_client import Counter, Histogram

# Scoring metrics
health_score_counter = Counter(
    "finavatar_health_score_total",
    "Financial health scores computed",
    ["archetype"],  # fit | average | heavy
)

happiness_histogram = Histogram(
    "finavatar_happiness_level",
    "Distribution of computed happiness levels",
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)

# Habit metrics
habit_mutation_counter = Counter(
    "finavatar_habit_mutations_total",
    "Habit create/update/delete operations",
    ["operation"],  # add | update | delete
)

# Advisor metrics
advisor_call_counter = Counter(
    "finavatar_advisor_calls_total",
    "Generative AI advisor calls by outcome",
    ["operation", "outcome"],  # outcome: ok | empty | unavailable
)

advisor_latency_histogram = Histogram(
    "advisor_latency_seconds",
    "Generative AI service response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

advisor_failure_counter = Counter(
    "advisor_failures_total",
    "Failed generative AI requests (including retried attempts)",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_health_score(archetype: str, happiness_level: float) -> None:
    """Record archetype mix and happiness distribution"""
    health_score_counter.labels(archetype=archetype).inc()
    happiness_histogram.observe(happiness_level)


def record_habit_mutation(operation: str) -> None:
    habit_mutation_counter.labels(operation=operation).inc()


def record_advisor_call(operation: str, outcome: str) -> None:
    advisor_call_counter.labels(operation=operation, outcome=outcome).inc()
