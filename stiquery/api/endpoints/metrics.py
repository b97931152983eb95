"""
Metrics endpoints.

`router` is mounted under the versioned API prefix and returns the named
in-process counters; `scrape_router` exposes the Prometheus registry
(`stiquery_units_generated_total{language=...}`) at the unversioned `/metrics`.
"""
from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from stiquery.core.observability.metrics import snapshot_named

router = APIRouter()
scrape_router = APIRouter()


@router.get("/metrics/snapshot")
def metrics_snapshot():
    return snapshot_named()


@scrape_router.get("/metrics", include_in_schema=False)
def prometheus_metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
