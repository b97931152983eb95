from __future__ import annotations

from fastapi import APIRouter

from stiquery import __version__
from stiquery.core.generators.renderers import supported_languages
from stiquery.core.observability.metrics import inc_named

router = APIRouter()


@router.get("/health/live")
def liveness():
    inc_named("health_live")
    return {"status": "alive"}


@router.get("/health/ready")
def readiness():
    inc_named("health_ready")
    return {"status": "ready", "version": __version__, "languages": supported_languages()}
