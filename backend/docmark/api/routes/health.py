"""Health check endpoints."""

from fastapi import APIRouter, Depends

from docmark import __version__
from docmark.api.deps import get_app_settings
from docmark.core.config import Settings
from docmark.schemas import HealthResponse

router = APIRouter()


@router.get("/health", tags=["system"], response_model=HealthResponse)
def healthcheck(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Simple readiness probe."""

    return HealthResponse(status="ok", app=settings.app_name, version=__version__)
