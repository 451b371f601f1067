# /app/observability/metrics.py
import os
import time
import atexit

from fastapi import APIRouter, Response, Request

from prometheus_client import (
    REGISTRY,
    CONTENT_TYPE_LATEST,
    generate_latest,
    Counter,
    Histogram,
    CollectorRegistry,
)
from prometheus_client import multiprocess

# -----------------------
# Registry / multiprocess
# -----------------------
def _get_registry():
    """
    Use a per-process CollectorRegistry with MultiProcessCollector
    when PROMETHEUS_MULTIPROC_DIR is set; otherwise use the global REGISTRY.
    """
    if "PROMETHEUS_MULTIPROC_DIR" in os.environ:
        reg = CollectorRegistry()
        multiprocess.MultiProcessCollector(reg)
        atexit.register(multiprocess.mark_process_dead, os.getpid())
        return reg
    return REGISTRY

REG = _get_registry()

# -----------------------
# HTTP request metrics (middleware will fill these)
# -----------------------
REQ_LATENCY = Histogram(
    "portfolio_request_duration_seconds",
    "Request duration (seconds)",
    ["path", "method", "status"],
    registry=REG,
)
REQ_COUNT = Counter(
    "portfolio_requests_total",
    "Total HTTP requests",
    ["path", "method", "status"],
    registry=REG,
)

# -----------------------
# Domain counters
# -----------------------
# outcome: admitted|rejected|unavailable|bad_response|not_configured
RECAPTCHA_VERIFICATIONS = Counter(
    "portfolio_recaptcha_verifications_total",
    "reCAPTCHA siteverify outcomes",
    ["outcome"],
    registry=REG,
)
# outcome: accepted|invalid|silent|blocked|undelivered
CONTACT_SUBMISSIONS = Counter(
    "portfolio_contact_submissions_total",
    "Contact form submission outcomes",
    ["outcome"],
    registry=REG,
)

router = APIRouter()

@router.get("/metrics")
async def metrics():
    return Response(generate_latest(REG), media_type=CONTENT_TYPE_LATEST)

# -----------------------
# HTTP middleware installer
# -----------------------
def install_http_metrics(app):
    @app.middleware("http")
    async def _metrics_middleware(request: Request, call_next):
        method = request.method
        start = time.perf_counter()
        try:
            resp = await call_next(request)
        except Exception:
            path = getattr(request.scope.get("route"), "path", None) or "static"
            REQ_COUNT.labels(path=path, method=method, status="500").inc()
            REQ_LATENCY.labels(path=path, method=method, status="500").observe(time.perf_counter() - start)
            raise
        # route is only resolved once the request went through the router;
        # static files have none, bucket them so labels stay low-cardinality
        route = request.scope.get("route")
        path = getattr(route, "path", None) or "static"
        status = str(resp.status_code)
        REQ_LATENCY.labels(path=path, method=method, status=status).observe(time.perf_counter() - start)
        REQ_COUNT.labels(path=path, method=method, status=status).inc()
        return resp
