"""Prometheus metrics for monitoring score distribution, risk tiers and data quality"""

from prometheus_client import Counter, Histogram
from altcredit_gateway.domain.models import CreditAnalysisResult

# Analysis metrics
analysis_counter = Counter(
    "altcredit_analysis_total",
    "Total credit analyses completed",
    ["risk_tier"],  # low | medium | high
)

score_histogram = Histogram(
    "altcredit_score",
    "Final alternative credit scores",
    buckets=[300, 400, 500, 600, 650, 700, 750, 800, 900],
)

records_dropped_counter = Counter(
    "altcredit_records_dropped_total",
    "Raw records dropped during normalization",
    ["source"],  # sms | upi | mobile
)

rescore_rejected_counter = Counter(
    "altcredit_rescore_rejected_total",
    "Scoring requests rejected by the re-score cooldown",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(result: CreditAnalysisResult) -> None:
    """Record analysis outcome and per-source dropped record counts"""
    analysis_counter.labels(risk_tier=result.risk_tier).inc()
    score_histogram.observe(result.final_score)

    for coverage in result.source_coverage:
        if coverage.dropped_count:
            records_dropped_counter.labels(source=coverage.source).inc(coverage.dropped_count)
