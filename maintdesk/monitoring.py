# maintdesk/monitoring.py
"""
Centralized monitoring: Prometheus metrics, structured JSON logging, optional Sentry.

Env vars:
- PROMETHEUS_ENABLED (default: true)
- SENTRY_DSN (optional)
- LOG_AS_JSON (default: true)
- LOG_LEVEL (default: INFO)
- ENVIRONMENT (default: development)
"""

import os
import logging
import time
from typing import Tuple

import sentry_sdk
from pythonjsonlogger import jsonlogger
from prometheus_client import (
    Counter, Histogram, Gauge,
    generate_latest, CONTENT_TYPE_LATEST, REGISTRY,
)

# --- ENV flags
PROMETHEUS_ENABLED = os.getenv("PROMETHEUS_ENABLED", "true").lower() in ("1", "true", "yes")
SENTRY_DSN = os.getenv("SENTRY_DSN", None)
LOG_AS_JSON = os.getenv("LOG_AS_JSON", "true").lower() in ("1", "true", "yes")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


# --- Logger setup
def setup_logger(name: str = "maintdesk", level: int = None) -> logging.Logger:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO")) if level is None else level
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        if LOG_AS_JSON:
            fmt = jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s"
            )
            handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger


logger = setup_logger()

# --- Sentry (optional)
if SENTRY_DSN:
    sentry_sdk.init(dsn=SENTRY_DSN, environment=ENVIRONMENT)
    logger.info("Sentry initialized")


# --- Prometheus metrics
REQUEST_COUNT = Counter(
    "maintdesk_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "maintdesk_http_request_latency_seconds",
    "Request latency in seconds",
    ["endpoint"],
)

STORE_QUERIES = Counter(
    "maintdesk_store_queries_total",
    "Queries issued against the remote store",
    ["table", "operation", "outcome"],
)

STORE_LATENCY = Histogram(
    "maintdesk_store_latency_seconds",
    "Remote store round-trip latency",
    ["table", "operation"],
)

VALIDATION_FAILURES = Counter(
    "maintdesk_form_validation_failures_total",
    "Form fields rejected by validation",
    ["field"],
)

SUBMISSIONS = Counter(
    "maintdesk_request_submissions_total",
    "Maintenance request submissions",
    ["outcome"],
)

LAST_LISTED_REQUESTS = Gauge(
    "maintdesk_last_listed_requests",
    "Requests returned by the last list load",
)


# --- Helper wrappers (never crash the app)
def observe_request(start_ts: float, endpoint: str, method: str, status: str):
    try:
        REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.time() - start_ts)
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()
    except Exception:
        pass


def observe_store_query(start_ts: float, table: str, operation: str, outcome: str):
    try:
        STORE_LATENCY.labels(table=table, operation=operation).observe(time.time() - start_ts)
        STORE_QUERIES.labels(table=table, operation=operation, outcome=outcome).inc()
    except Exception:
        pass


def inc_validation_failure(field: str):
    try:
        VALIDATION_FAILURES.labels(field=field).inc()
    except Exception:
        pass


def inc_submission(outcome: str):
    try:
        SUBMISSIONS.labels(outcome=outcome).inc()
    except Exception:
        pass


def set_last_listed_requests(n: int):
    try:
        LAST_LISTED_REQUESTS.set(n)
    except Exception:
        pass


def prometheus_metrics_response() -> Tuple[bytes, str]:
    """Return (body_bytes, content_type) for Prometheus scrape."""
    try:
        return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
    except Exception:
        return b"", CONTENT_TYPE_LATEST
