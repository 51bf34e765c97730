"""
Prometheus Metrics for the AlertNAV service
Exposes metrics for API performance, logins, location queries and database errors.
"""
from typing import Optional

from prometheus_client import Counter, Gauge, Histogram, Info, generate_latest, CONTENT_TYPE_LATEST

from alertnav import __version__


# =============================================================================
# Application Info
# =============================================================================
app_info = Info('alertnav', 'AlertNAV Service Information')
app_info.info({
    'version': __version__,
    'service': 'alertnav',
    'description': 'Latest device locations map'
})


# =============================================================================
# API Request Metrics
# =============================================================================
http_requests_total = Counter(
    'alertnav_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'alertnav_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

http_requests_in_progress = Gauge(
    'alertnav_http_requests_in_progress',
    'Number of HTTP requests currently being processed'
)


# =============================================================================
# Session Metrics
# =============================================================================
logins_total = Counter(
    'alertnav_logins_total',
    'Total successful logins',
    ['user_type']  # new, returning
)

session_redirects_total = Counter(
    'alertnav_session_redirects_total',
    'Requests redirected by the session gate',
    ['target']  # login, home
)


# =============================================================================
# Location Metrics
# =============================================================================
location_operations_total = Counter(
    'alertnav_location_operations_total',
    'Total location reading operations',
    ['operation']  # list, get, update
)

locations_returned = Histogram(
    'alertnav_locations_returned',
    'Number of devices returned by a latest-location query',
    buckets=[0, 1, 5, 10, 50, 100, 500, 1000]
)


# =============================================================================
# Database Metrics
# =============================================================================
db_errors_total = Counter(
    'alertnav_db_errors_total',
    'Total database errors',
    ['operation', 'error_type']
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_metrics():
    """Generate metrics in Prometheus format"""
    return generate_latest()


def get_content_type():
    """Get the content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST


def record_request(method: str, endpoint: str, status_code: int, duration: float):
    """Record a completed HTTP request"""
    http_requests_total.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def record_login(is_new_user: bool):
    """Record a successful login"""
    logins_total.labels(user_type='new' if is_new_user else 'returning').inc()


def record_session_redirect(target: str):
    """Record a session gate redirect"""
    session_redirects_total.labels(target=target).inc()


def record_location_operation(operation: str, count: Optional[int] = None):
    """Record a location operation, with the number of devices returned for lists"""
    location_operations_total.labels(operation=operation).inc()
    if count is not None:
        locations_returned.observe(count)


def record_db_error(operation: str, error_type: str):
    """Record a database error"""
    db_errors_total.labels(operation=operation, error_type=error_type).inc()
