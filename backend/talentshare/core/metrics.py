"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, conflict, error
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking creation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_cancellations = Counter(
    'booking_cancellations_total',
    'Total booking cancellations'
)

# Capacity ledger
capacity_recomputes = Counter(
    'capacity_recomputes_total',
    'Slot participant count recomputations'
)

admission_requests = Counter(
    'admission_requests_total',
    'Conditional slot admissions',
    ['result']  # admitted, rejected
)

# Notification fan-out
notification_emissions = Counter(
    'notification_emissions_total',
    'Notification records emitted',
    ['type', 'result']  # delivered, failed
)

# Reviews
reviews_created = Counter(
    'reviews_created_total',
    'Reviews created'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """Prometheus metrics payload."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, error"""
    booking_attempts.labels(status=status).inc()


def record_admission(admitted: bool):
    result = "admitted" if admitted else "rejected"
    admission_requests.labels(result=result).inc()


def record_notification(notification_type: str, delivered: bool):
    result = "delivered" if delivered else "failed"
    notification_emissions.labels(type=notification_type, result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
