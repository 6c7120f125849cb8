"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking validator outcomes
booking_decisions = Counter(
    'booking_decisions_total',
    'Event creation requests by booking validator outcome',
    ['result']  # accepted, validation_error, not_found, venue_unavailable, capacity_exceeded, insufficient_budget
)

# Venue request workflow
venue_request_transitions = Counter(
    'venue_request_transitions_total',
    'Venue request decisions by outcome',
    ['action', 'result']  # approved/rejected, applied/forbidden/invalid/conflict
)

# Reviews
review_appends = Counter(
    'review_appends_total',
    'Reviews appended',
    ['target']  # venue, event
)

# Authentication
auth_rejections = Counter(
    'auth_rejections_total',
    'Requests rejected by the token verifier or role gate',
    ['reason']
)

# Cache
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_decision(result: str):
    booking_decisions.labels(result=result).inc()


def record_venue_request_transition(action: str, result: str):
    venue_request_transitions.labels(action=action, result=result).inc()


def record_review(target: str):
    review_appends.labels(target=target).inc()


def record_auth_rejection(reason: str):
    auth_rejections.labels(reason=reason).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
