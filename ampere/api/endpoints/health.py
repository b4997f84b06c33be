from fastapi import APIRouter, Depends

from ampere.core.config import APP_VERSION
from ampere.services.container import AmpereServices, get_services

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness probe")
async def health_check(services: AmpereServices = Depends(get_services)) -> dict[str, str]:
    return {
        "status": "ok",
        "version": APP_VERSION,
        "storage": type(services.storage).__name__,
    }
