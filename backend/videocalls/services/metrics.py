"""Prometheus metrics for the call lifecycle and its external collaborators.

Metrics exported:
- video_call_transitions_total: Counter of applied lifecycle operations
- room_provider_requests_total: Counter of provider calls by outcome
- room_provider_latency_seconds: Histogram of provider call latency
- call_notifications_failed_total: Counter of notifications that could not be published

The app mounts prometheus_client's ASGI app at /metrics (see main.py).
"""

from prometheus_client import Counter, Histogram

call_transitions = Counter(
    'video_call_transitions_total',
    'Lifecycle operations applied to call records',
    labelnames=['action']  # schedule, instant, update, cancel, start, end, join, leave
)

provider_requests = Counter(
    'room_provider_requests_total',
    'Requests made to the room provider',
    labelnames=['operation', 'outcome']  # outcome: success, error
)

provider_latency = Histogram(
    'room_provider_latency_seconds',
    'Room provider request latency',
    labelnames=['operation']
)

notification_failures = Counter(
    'call_notifications_failed_total',
    'Call notifications that could not be published',
    labelnames=['event']
)
