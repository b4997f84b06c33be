from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from ampere.models.profile import ProfileUpdate
from ampere.models.requests import ConnectedRequest, FavoriteToggleRequest, NotificationsRequest
from ampere.services.container import AmpereServices, get_services
from ampere.services.profile_store import FAVORITE_FIELDS

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(services: AmpereServices = Depends(get_services)) -> dict:
    return services.profiles.current().to_public()


@router.put("")
async def save_profile(update: ProfileUpdate, services: AmpereServices = Depends(get_services)) -> dict:
    """Settings / setup save. Only the fields sent are changed."""
    profile = services.profiles.update_profile(update)
    services.engagement.track(
        "profile_save",
        {
            "platforms": len(profile.favorite_platform_ids),
            "leagues": len(profile.favorite_leagues),
            "teams": len(profile.favorite_teams),
        },
    )
    return profile.to_public()


@router.post("/favorites/{kind}/toggle")
async def toggle_favorite(
    kind: str, body: FavoriteToggleRequest, services: AmpereServices = Depends(get_services)
) -> dict:
    if kind not in FAVORITE_FIELDS:
        raise HTTPException(status_code=400, detail=f"Unknown favorite kind '{kind}'")

    before = getattr(services.profiles.current(), FAVORITE_FIELDS[kind])
    profile = services.profiles.toggle_favorite(kind, body.value)
    services.engagement.track(f"favorite_{kind}_toggle", {"value": body.value, "on": body.value not in before})
    logger.debug(f"Toggled favorite {kind}: {body.value}")
    return profile.to_public()


@router.post("/connected/{platform_id}")
async def set_connected(
    platform_id: str, body: ConnectedRequest, services: AmpereServices = Depends(get_services)
) -> dict:
    profile = services.profiles.set_connected(platform_id, body.on)
    services.engagement.track(
        "connected_toggle", {"platformId": platform_id, "on": profile.connected_platform_ids[platform_id]}
    )
    return profile.to_public()


@router.post("/notifications")
async def set_notifications(body: NotificationsRequest, services: AmpereServices = Depends(get_services)) -> dict:
    profile = services.profiles.set_notifications(body.enabled)
    services.engagement.track("notifications_toggle", {"on": profile.notifications_enabled})
    return profile.to_public()
