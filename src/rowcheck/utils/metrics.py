"""
Prometheus metrics for row count assertions.

rowcheck usually runs as a short-lived batch step, so metrics live in their
own CollectorRegistry and are pushed to a Pushgateway at the end of a run
rather than scraped.

Usage:
    from rowcheck.utils.metrics import CheckMetrics

    metrics = CheckMetrics()
    outcome = run_check("orders = staged_orders", store, metrics=metrics)
    metrics.push("pushgateway:9091", job="nightly_load")
"""

import logging

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    push_to_gateway,
)

logger = logging.getLogger(__name__)


class CheckMetrics:
    """
    Metrics for row count assertions

    Tracks assertion outcomes, row count queries and durations.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize check metrics

        Args:
            registry: Prometheus registry (default: a new private registry)
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        self.checks_total = Counter(
            "rowcheck_checks_total",
            "Total number of row count assertions evaluated",
            ["outcome", "severity"],
            registry=self.registry,
        )

        self.check_duration_seconds = Histogram(
            "rowcheck_check_duration_seconds",
            "Duration of row count assertions in seconds",
            buckets=(0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60, 300),
            registry=self.registry,
        )

        self.row_count_queries_total = Counter(
            "rowcheck_row_count_queries_total",
            "Total number of row count queries issued",
            ["table_name"],
            registry=self.registry,
        )

        self.table_row_count = Gauge(
            "rowcheck_table_row_count",
            "Most recent row count observed for a table",
            ["table_name"],
            registry=self.registry,
        )

        self.exit_status = Gauge(
            "rowcheck_exit_status",
            "Highest exit status floor raised in this process",
            registry=self.registry,
        )
        self._highest_exit_status = 0

    def record_check(self, outcome: str, severity: str, duration: float) -> None:
        """
        Record a completed assertion

        Args:
            outcome: 'passed' or the failure kind (e.g. 'EXPRESSION_FALSE')
            severity: Normalized severity name
            duration: Duration in seconds
        """
        self.checks_total.labels(outcome=outcome, severity=severity).inc()
        self.check_duration_seconds.observe(duration)

    def record_row_count(self, table_name: str, row_count: int) -> None:
        """Record a row count query and its result"""
        self.row_count_queries_total.labels(table_name=table_name).inc()
        self.table_row_count.labels(table_name=table_name).set(row_count)

    def record_exit_status(self, code: int) -> None:
        """Raise the exit status gauge; lower values are ignored"""
        self._highest_exit_status = max(self._highest_exit_status, code)
        self.exit_status.set(self._highest_exit_status)

    def push(self, gateway: str, job: str = "rowcheck") -> None:
        """
        Push all metrics to a Prometheus Pushgateway

        Args:
            gateway: Pushgateway address (host:port)
            job: Job label for the pushed group
        """
        push_to_gateway(gateway, job=job, registry=self.registry)
        logger.info(f"Pushed metrics to {gateway} (job={job})")
