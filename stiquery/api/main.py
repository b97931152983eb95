from __future__ import annotations

from fastapi import FastAPI

from stiquery import __version__
from stiquery.api.endpoints import health
from stiquery.api.endpoints import metrics as metrics_ep
from stiquery.api.endpoints.query_inheritance import router as query_inheritance_router
from stiquery.api.middleware.error_shaping import SafeErrorMiddleware
from stiquery.api.middleware.request_context import RequestContextMiddleware

app = FastAPI(
    title="STI Query Generator API",
    version=__version__,
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
#   SafeErrorMiddleware -> RequestContext -> handler
# ------------------------------------------------------------
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)


# ------------------------------------------------------------
# Versioned
# ------------------------------------------------------------
app.include_router(health.router, prefix="/api/v1")
app.include_router(metrics_ep.router, prefix="/api/v1")
app.include_router(query_inheritance_router, prefix="/api/v1")

# Prometheus scrape (unversioned)
app.include_router(metrics_ep.scrape_router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
