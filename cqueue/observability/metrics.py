"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from cqueue.constants import (
    METRIC_API_LATENCY,
    METRIC_API_REQUESTS,
    METRIC_EMPTY_PULLS,
    METRIC_JOB_TRANSITIONS,
    METRIC_JOB_TRANSITIONS_REJECTED,
    METRIC_JOBS_SUBMITTED,
    METRIC_QUEUE_DEPTH,
    JobStatus,
)
from cqueue.store.models import QueueStats

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for the job queue.

    Collects metrics for:
    - Jobs per status
    - Job submissions and state transitions
    - Rejected transitions and empty pulls
    - API requests
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of jobs currently in each status",
            ["status"],
            registry=self._registry,
        )

        self.jobs_submitted = Counter(
            METRIC_JOBS_SUBMITTED,
            "Total number of jobs submitted",
            ["kind"],
            registry=self._registry,
        )

        self.job_transitions = Counter(
            METRIC_JOB_TRANSITIONS,
            "Total number of applied job state transitions",
            ["action"],
            registry=self._registry,
        )

        self.job_transitions_rejected = Counter(
            METRIC_JOB_TRANSITIONS_REJECTED,
            "Total number of job state transitions rejected by the store",
            ["action", "reason"],
            registry=self._registry,
        )

        self.empty_pulls = Counter(
            METRIC_EMPTY_PULLS,
            "Total number of pulls that found no queued job",
            registry=self._registry,
        )

        self.api_requests = Counter(
            METRIC_API_REQUESTS,
            "Total number of API requests",
            ["method", "endpoint", "status"],
            registry=self._registry,
        )

        self.api_latency = Histogram(
            METRIC_API_LATENCY,
            "API request latency in seconds",
            ["method", "endpoint"],
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

    def record_job_submitted(self, kind: str) -> None:
        """Record a job submission."""
        self.jobs_submitted.labels(kind=kind).inc()

    def record_transition(self, action: str) -> None:
        """Record an applied state transition."""
        self.job_transitions.labels(action=action).inc()

    def record_transition_rejected(self, action: str, reason: str) -> None:
        """Record a transition the store refused."""
        self.job_transitions_rejected.labels(action=action, reason=reason).inc()

    def record_empty_pull(self) -> None:
        self.empty_pulls.inc()

    def update_queue_depth(self, stats: QueueStats) -> None:
        """Set the per-status gauges from a stats snapshot."""
        for status in JobStatus:
            self.queue_depth.labels(status=status.value).set(stats.count(status))

    def record_api_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration_seconds: float,
    ) -> None:
        """Record an API request."""
        self.api_requests.labels(
            method=method,
            endpoint=endpoint,
            status=str(status),
        ).inc()
        self.api_latency.labels(method=method, endpoint=endpoint).observe(
            duration_seconds
        )

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the process-wide metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """Get the metrics collector instance, creating it on first use."""
    if _metrics is None:
        return setup_metrics()
    return _metrics
