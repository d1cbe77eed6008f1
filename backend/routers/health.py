from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response

from core.dependencies import get_metrics
from core.metrics import HttpMetrics
from schemas.stats import HealthRead

router = APIRouter()


@router.get("/health", response_model=HealthRead)
async def health():
    """Liveness check; does not touch the database"""
    return HealthRead(status="ok", timestamp=datetime.now(timezone.utc))


@router.get("/metrics")
async def metrics(http_metrics: HttpMetrics = Depends(get_metrics)):
    """Prometheus text exposition of the HTTP counters"""
    return Response(content=http_metrics.render(), media_type=http_metrics.content_type)
