"""
Metrics adapter that implements MetricsPort protocol.

This adapter wraps the Prometheus metrics to provide a clean interface
for the application layer.
"""
from infrastructure.metrics.metrics import (
    explore_decision_total,
    explore_mutual_likes_total,
    explore_mark_seen_failures_total,
    explore_likers_page_size,
)

class MetricsAdapter:
    """Adapter that implements MetricsPort on top of the Prometheus registry."""

    def increment_decision_total(self, outcome: str) -> None:
        """
        Increment the explore_decision_total counter.

        Args:
            outcome: One of "like" or "pass"
        """
        explore_decision_total.labels(outcome=outcome).inc()

    def increment_mutual_likes(self) -> None:
        explore_mutual_likes_total.inc()

    def increment_mark_seen_failures(self) -> None:
        explore_mark_seen_failures_total.inc()

    def observe_likers_page_size(self, size: int) -> None:
        explore_likers_page_size.observe(size)
