"""
Settlement Metrics Collection

Prometheus metrics for message settlement outcomes and latency.

Author: asb-transport Contributors
Date: 2026-10-18
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram


class SettlementMetrics:
    """
    Prometheus metrics collector for settlement operations.

    Args:
        registry: Prometheus registry (uses default if None)
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry

        self.messages_settled_total = Counter(
            'asb_transport_messages_settled_total',
            'Total messages settled',
            ['operation', 'mode'],
            registry=registry
        )

        self.settlements_skipped_total = Counter(
            'asb_transport_settlements_skipped_total',
            'Settlement calls skipped because the transaction mode is NONE',
            ['operation'],
            registry=registry
        )

        self.settlement_errors_total = Counter(
            'asb_transport_settlement_errors_total',
            'Total failed settlement calls',
            ['operation', 'error_type'],
            registry=registry
        )

        self.settlement_duration_seconds = Histogram(
            'asb_transport_settlement_duration_seconds',
            'Remote settlement call latency',
            ['operation'],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=registry
        )

    def track_settled(self, operation: str, mode: str, duration: float) -> None:
        self.messages_settled_total.labels(operation=operation, mode=mode).inc()
        self.settlement_duration_seconds.labels(operation=operation).observe(duration)

    def track_skipped(self, operation: str) -> None:
        self.settlements_skipped_total.labels(operation=operation).inc()

    def track_error(self, operation: str, error_type: str) -> None:
        """
        Track a failed settlement call.

        Args:
            operation: 'complete' or 'abandon'
            error_type: Exception class name raised by the receiver
        """
        self.settlement_errors_total.labels(operation=operation, error_type=error_type).inc()


# Global metrics instance
_metrics: Optional[SettlementMetrics] = None


def get_metrics() -> SettlementMetrics:
    """Get global metrics instance (singleton)."""
    global _metrics
    if _metrics is None:
        _metrics = SettlementMetrics()
    return _metrics
