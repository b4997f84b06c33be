import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ampere.api.main import api_router
from ampere.services.container import close_services

from .config import settings
from .version import __version__

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    yield
    try:
        close_services()
        logger.info("Storage clients closed")
    except Exception as exc:
        logger.warning(f"Failed to close storage clients: {exc}")


app = FastAPI(
    title="Ampere",
    description="Personalized rail ranking and local engagement store",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.APP_ENV != "development" else "/docs",
    redoc_url=None if settings.APP_ENV != "development" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
