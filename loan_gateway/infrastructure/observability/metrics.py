"""Prometheus metrics for monitoring decision mix, score distribution, and policy loading"""

from prometheus_client import Counter, Histogram

from loan_gateway.domain.models import Assessment

# Assessment metrics
assessment_counter = Counter(
    "loan_assessment_total",
    "Total loan assessments made",
    ["decision"],  # APPROVED | REVIEW | REJECTED
)

composite_score_histogram = Histogram(
    "loan_assessment_composite_score",
    "Composite risk score per assessment",
    buckets=[0, 20, 40, 55, 70, 85, 100],
)

checkpoint_counter = Counter(
    "loan_checkpoint_total",
    "Checkpoint outcomes by rule",
    ["label", "status"],
)

# Policy source metrics
policy_fetch_failures_counter = Counter(
    "policy_fetch_failures_total",
    "Failed policy dataset fetches",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(assessment: Assessment) -> None:
    """Record decision mix, score, and per-rule outcomes"""
    assessment_counter.labels(decision=assessment.decision.value).inc()
    composite_score_histogram.observe(assessment.composite_score)

    for checkpoint in assessment.checkpoints:
        checkpoint_counter.labels(label=checkpoint.label, status=checkpoint.status.value).inc()
