from fastapi import APIRouter, Depends

from ampere.models.card import Card
from ampere.models.requests import TrackRequest
from ampere.services.container import AmpereServices, get_services

router = APIRouter(tags=["engagement"])


@router.get("/session")
async def get_session(services: AmpereServices = Depends(get_services)) -> dict[str, str]:
    return {"sessionId": services.session.get_session_id()}


@router.get("/viewing")
async def get_viewing(services: AmpereServices = Depends(get_services)) -> list[dict]:
    return [e.model_dump(mode="json", by_alias=True) for e in services.engagement.load_viewing()]


@router.post("/viewing", status_code=202)
async def log_viewing(card: Card, services: AmpereServices = Depends(get_services)) -> dict[str, str]:
    """Called when the user opens a card."""
    services.engagement.log_viewing(card)
    return {"status": "accepted"}


@router.get("/attribution")
async def get_attribution(services: AmpereServices = Depends(get_services)) -> list[dict]:
    return [e.model_dump(mode="json", by_alias=True) for e in services.engagement.load_attribution()]


@router.post("/track", status_code=202)
async def track(body: TrackRequest, services: AmpereServices = Depends(get_services)) -> dict[str, str]:
    services.engagement.track(body.event, body.props)
    return {"status": "accepted"}
