import json

from fastapi import APIRouter, Body, Depends, HTTPException
from loguru import logger

from ampere.services.container import AmpereServices, get_services

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export")
async def export_data(services: AmpereServices = Depends(get_services)) -> dict:
    """Everything persisted locally, as one versioned document."""
    return json.loads(services.portability.export_all())


@router.post("/import")
async def import_data(document: dict = Body(...), services: AmpereServices = Depends(get_services)) -> dict:
    if not services.portability.import_all(json.dumps(document)):
        logger.warning("Rejected data import")
        raise HTTPException(status_code=400, detail="Unsupported or malformed export document")
    return {"status": "imported"}
