# backend/carecompare/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION
from .errors import register_error_handlers
from .routes import prometheus
from .routes.v1 import health as health_v1, search as search_v1
from .services.search.config import get_search_config

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: log effective configuration on startup."""
    logger.info(
        "Starting %s in %s mode (geocoding provider: %s)",
        API_TITLE,
        settings.environment,
        settings.geocoding_provider,
    )
    logger.info("Search configuration: %s", get_search_config().to_dict())
    yield
    logger.info("Shutting down %s", API_TITLE)


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.add_middleware(GZipMiddleware, minimum_size=500)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(health_v1.router)
api_v1.include_router(search_v1.router, prefix="/search")

app.include_router(api_v1)
app.include_router(prometheus.router)


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": f"Welcome to the {API_TITLE}", "version": API_VERSION}
