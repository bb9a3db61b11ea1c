# infrastructure/metrics/metrics.py
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

explore_decision_total = Counter(
    "explore_decision_total",
    "Total like/pass decisions recorded",
    ["outcome"]  # like|pass
)

explore_mutual_likes_total = Counter(
    "explore_mutual_likes_total",
    "Decisions that completed a mutual like"
)

explore_mark_seen_failures_total = Counter(
    "explore_mark_seen_failures_total",
    "Background mark-as-seen jobs that failed or timed out"
)

decision_store_failures_total = Counter(
    "decision_store_failures_total",
    "Failed statements against the decisions table",
    ["operation"]  # list|count|upsert|mark_seen
)

explore_likers_page_size = Histogram(
    "explore_likers_page_size",
    "Number of likers returned per listing page",
    buckets=[0, 1, 2, 5, 10]
)

def metrics_endpoint():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
