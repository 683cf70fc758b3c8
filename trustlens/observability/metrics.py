"""
Prometheus metrics for the scoring pipeline.

Tracks:
- Trust score recomputations by resulting risk tier
- Behavior classifications by label
- Text analyses by path (gibberish short-circuit vs feature analysis)
- External classifier failures
- Community votes, workflow transitions and emitted alerts
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from trustlens.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)


class MetricsCollector:
    """
    Prometheus metrics collector for trustlens.

    Usage:
        metrics = get_metrics()
        metrics.record_trust_score("low")
        metrics.analysis_latency.labels(stage="text").observe(0.02)
    """

    def __init__(self):
        self.trust_scores_computed = Counter(
            "trustlens_trust_scores_computed_total",
            "Total trust score recomputations",
            ["risk_level"],
        )

        self.behavior_classifications = Counter(
            "trustlens_behavior_classifications_total",
            "Total behavioral classifications",
            ["label"],  # human, suspicious, bot, insufficient_data
        )

        self.text_analyses = Counter(
            "trustlens_text_analyses_total",
            "Total review text analyses",
            ["path"],  # gibberish, features
        )

        self.external_service_failures = Counter(
            "trustlens_external_service_failures_total",
            "External text classifier failures",
            ["reason"],  # timeout, circuit_open, http_error, disabled
        )

        self.votes_recorded = Counter(
            "trustlens_votes_recorded_total",
            "Community votes accepted",
        )

        self.workflow_transitions = Counter(
            "trustlens_workflow_transitions_total",
            "Authentication records entering a workflow stage",
            ["stage"],
        )

        self.alerts_emitted = Counter(
            "trustlens_alerts_emitted_total",
            "Alerts persisted and dispatched",
            ["severity"],
        )

        self.analysis_latency = Histogram(
            "trustlens_analysis_latency_seconds",
            "Latency of analysis stages",
            ["stage"],  # text, behavior, trust, workflow
            buckets=LATENCY_BUCKETS,
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """Start the Prometheus HTTP exporter (default port from settings)."""
        port = port or get_settings().metrics_port
        start_http_server(port, registry=REGISTRY)
        logger.info("Prometheus metrics server started on port %d", port)

    # Convenience methods

    def record_trust_score(self, risk_level: str) -> None:
        self.trust_scores_computed.labels(risk_level=risk_level).inc()

    def record_behavior(self, label: str) -> None:
        self.behavior_classifications.labels(label=label).inc()

    def record_text_analysis(self, path: str, latency: float | None = None) -> None:
        """
        Record a text analysis.

        Args:
            path: "gibberish" when the pre-filter short-circuited, else "features"
            latency: Optional wall time in seconds
        """
        self.text_analyses.labels(path=path).inc()
        if latency is not None:
            self.analysis_latency.labels(stage="text").observe(latency)

    def record_external_failure(self, reason: str) -> None:
        self.external_service_failures.labels(reason=reason).inc()

    def record_vote(self) -> None:
        self.votes_recorded.inc()

    def record_transition(self, stage: str) -> None:
        self.workflow_transitions.labels(stage=stage).inc()

    def record_alert(self, severity: str, count: int = 1) -> None:
        self.alerts_emitted.labels(severity=severity).inc(count)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
