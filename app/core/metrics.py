"""Prometheus metrics for the CourseMaster backend.

All metrics are declared here; other modules import the ones they need
and update them where the event happens.  The HTTP metrics are fed by
MetricsMiddleware, the domain counters by the services.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# --- HTTP traffic ---

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# --- Domain events ---

ENROLLMENTS_CREATED = Counter(
    "coursemaster_enrollments_created_total",
    "Enrollments created",
)

ENROLLMENT_CONFLICTS = Counter(
    "coursemaster_enrollment_conflicts_total",
    "Enrollment requests rejected because (email, course) already exists",
)

ENROLLMENT_TRANSITIONS = Counter(
    "coursemaster_enrollment_transitions_total",
    "Enrollment status transitions applied",
    ["field", "to_status"],
)

SUBMISSIONS_COMPLETED = Counter(
    "coursemaster_submissions_completed_total",
    "Assignment submissions marked complete, by whether the parent "
    "enrollment was found",
    ["enrollment_updated"],
)
