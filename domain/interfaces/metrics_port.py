from typing_extensions import Protocol


class MetricsPort(Protocol):
    """Protocol for metrics operations."""

    def increment_decision_total(self, outcome: str) -> None:
        """
        Increment the explore_decision_total counter.

        Args:
            outcome: One of "like" or "pass"
        """
        ...

    def increment_mutual_likes(self) -> None:
        """Increment the explore_mutual_likes_total counter."""
        ...

    def increment_mark_seen_failures(self) -> None:
        """Increment the explore_mark_seen_failures_total counter."""
        ...

    def observe_likers_page_size(self, size: int) -> None:
        """
        Record how many likers a listing returned.

        Args:
            size: Number of likers on the page
        """
        ...
