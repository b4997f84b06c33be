from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from ampere.models.requests import DedupeRequest, RailsRequest, RankRequest, SearchRequest
from ampere.services.container import AmpereServices, get_services
from ampere.services.dedup import dedupe

router = APIRouter(prefix="/rails", tags=["rails"])


def _public(cards) -> list[dict]:
    return [c.to_public() for c in cards]


@router.post("/rank")
async def rank_cards(body: RankRequest, services: AmpereServices = Depends(get_services)) -> dict:
    """
    Order a rail for the current user.

    Profile and viewing history default to what is stored when the request
    does not carry them.
    """
    try:
        profile = services.profiles.normalize(body.profile) if body.profile is not None else services.profiles.current()
        viewing = body.viewing if body.viewing is not None else services.engagement.load_viewing()
        ranked = services.ranking.rank(body.cards, profile, viewing)
        return {"cards": _public(ranked)}
    except Exception as e:
        logger.exception(f"Error ranking {len(body.cards)} cards: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/dedupe")
async def dedupe_cards(body: DedupeRequest) -> dict:
    return {"cards": _public(dedupe(body.cards))}


@router.post("/home")
async def home(body: RailsRequest, services: AmpereServices = Depends(get_services)) -> dict:
    try:
        rails = services.rails.build_home(
            body.rails,
            services.profiles.current(),
            services.engagement.load_viewing(),
            body.filters,
        )
        return {"rails": {name: _public(cards) for name, cards in rails.items()}}
    except Exception as e:
        logger.exception(f"Error building home rails: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/favorites")
async def favorites(body: RailsRequest, services: AmpereServices = Depends(get_services)) -> dict:
    rails = services.rails.favorites_view(body.rails, services.profiles.current(), services.engagement.load_viewing())
    return {"rails": {name: _public(cards) for name, cards in rails.items()}}


@router.post("/search")
async def search(body: SearchRequest, services: AmpereServices = Depends(get_services)) -> dict:
    results = services.rails.search(body.rails, body.query, body.filters)
    if body.query.strip():
        services.engagement.track("search_submit", {"q": body.query.strip()})
    return {"cards": _public(results)}
