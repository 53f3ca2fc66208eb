"""
Monitoring and observability configuration.

Provides Prometheus metrics and structured logging for the Droplr client.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)
import time
from contextlib import contextmanager
from typing import Iterator
import logging
import os
from pythonjsonlogger import jsonlogger


# Prometheus Metrics
DROPLR_REQUESTS_TOTAL = Counter(
    'droplr_requests_total',
    'Total number of requests sent to the Droplr API',
    ['method', 'status']
)

DROPLR_REQUEST_DURATION_SECONDS = Histogram(
    'droplr_request_duration_seconds',
    'Droplr API request duration in seconds',
    ['method'],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

DROPLR_API_ERRORS_TOTAL = Counter(
    'droplr_api_errors_total',
    'Total number of errors signaled by the Droplr API',
    ['code']
)

DROPLR_TRANSPORT_ERRORS_TOTAL = Counter(
    'droplr_transport_errors_total',
    'Total number of requests that failed before a response arrived',
    ['error_type']
)


def configure_logging(level: str = None) -> logging.Logger:
    """
    Configure JSON structured logging on the root logger.

    Args:
        level: Log level name (default: LOG_LEVEL environment variable, or INFO)

    Returns:
        The root logger
    """
    log_handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        timestamp=True
    )
    log_handler.setFormatter(formatter)

    log_level_name = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    logging.root.handlers = []
    logging.root.addHandler(log_handler)
    logging.root.setLevel(log_level)

    return logging.root


@contextmanager
def track_request(method: str) -> Iterator[None]:
    """
    Time a request and record it in DROPLR_REQUEST_DURATION_SECONDS.

    Args:
        method: HTTP method of the request
    """
    start_time = time.time()
    try:
        yield
    finally:
        DROPLR_REQUEST_DURATION_SECONDS.labels(method=method).observe(time.time() - start_time)


def record_response(method: str, status_code: int) -> None:
    """Count a response received from the server."""
    DROPLR_REQUESTS_TOTAL.labels(method=method, status=str(status_code)).inc()


def record_api_error(code: str) -> None:
    """Count an error signaled through the droplr-errorcode header."""
    DROPLR_API_ERRORS_TOTAL.labels(code=code).inc()


def record_transport_error(error: Exception) -> None:
    """Count a request that failed in the transport."""
    DROPLR_TRANSPORT_ERRORS_TOTAL.labels(error_type=type(error).__name__).inc()


def get_metrics(registry: CollectorRegistry = REGISTRY):
    """
    Generate Prometheus metrics in exposition format.

    Export hook for host applications: the client never serves metrics
    itself, so an application embedding it returns this from its own
    /metrics endpoint (or scrapes the registry directly).

    Args:
        registry: Registry to render (default: the global registry the
                  droplr_* metrics are registered in)

    Returns:
        Tuple of (metrics_data, content_type)
    """
    return generate_latest(registry), CONTENT_TYPE_LATEST
