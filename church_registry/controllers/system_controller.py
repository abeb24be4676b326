# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""System endpoints: health, readiness, metrics and the dashboard summary."""
from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from church_registry.core.config import settings
from church_registry.core.dependencies import get_category_repo, get_dashboard_service
from church_registry.core.security import get_current_user
from church_registry.schemas import DashboardSummary
from church_registry.services.dashboard_service import DashboardService

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


@router.get("/health/ready")
def readiness_check():
    try:
        get_category_repo().verify_connection()
        return {"status": "ok", "database": "connected"}
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"Database unavailable: {exc}")


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/api/stats/summary", response_model=DashboardSummary,
            dependencies=[Depends(get_current_user)])
def dashboard_summary(service: DashboardService = Depends(get_dashboard_service)):
    return service.summary()
