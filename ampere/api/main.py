from fastapi import APIRouter

from .endpoints.data import router as data_router
from .endpoints.engagement import router as engagement_router
from .endpoints.health import router as health_router
from .endpoints.profile import router as profile_router
from .endpoints.rails import router as rails_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Ampere API is running"}


api_router.include_router(health_router)
api_router.include_router(profile_router)
api_router.include_router(engagement_router)
api_router.include_router(rails_router)
api_router.include_router(data_router)
