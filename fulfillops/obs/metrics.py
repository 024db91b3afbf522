# fulfillops/obs/metrics.py
from __future__ import annotations

import os
import time

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "fulfillops_http_requests_total", "HTTP requests", ["method", "path", "code"]
)
http_request_duration = Histogram(
    "fulfillops_http_request_duration_seconds", "HTTP request duration seconds", ["method", "path"]
)

# QC 审核决策（approve / reject / noop）；Grafana 上看驳回率
qc_decisions_total = Counter(
    "fulfillops_qc_decisions_total", "QC review decisions", ["qc_type", "decision"]
)
qc_submissions_total = Counter(
    "fulfillops_qc_submissions_total", "QC submissions by sellers", ["qc_type", "resubmission"]
)
lifecycle_advances_total = Counter(
    "fulfillops_lifecycle_advances_total", "Order line lifecycle advances", ["target"]
)


def _route_path(request) -> str:
    # 用路由模板当 label，避免 /order-lines/123 这类高基数 path
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        path = _route_path(request)
        http_requests_total.labels(request.method, path, str(response.status_code)).inc()
        http_request_duration.labels(request.method, path).observe(elapsed)
        return response


router = APIRouter(tags=["ops"])


@router.get("/metrics")
def metrics() -> Response:
    """
    单进程：直接导出默认 REGISTRY；
    多进程（设置了 PROMETHEUS_MULTIPROC_DIR）：临时 CollectorRegistry 合并各分片。
    """
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        payload = generate_latest(registry)
    else:
        payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
