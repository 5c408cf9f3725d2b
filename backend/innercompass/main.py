"""Main FastAPI application for InnerCompass AI."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from innercompass.config import settings

# Configure logging to output to stdout
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)
from innercompass.content import CATALOG
from innercompass.models import init_db
from innercompass.routers import auth_router, progress_router, topics_router


def check_api_keys() -> None:
    """Log which language-model provider is configured."""
    key = settings.anthropic_api_key if settings.llm_provider == "anthropic" else settings.llm_api_key
    if key:
        masked = key[:6] + "..." + key[-4:]
        logger.info(f"[Config] {settings.llm_provider} API key: {masked} (model {settings.model_coach})")
    else:
        logger.warning(
            f"[Config] {settings.llm_provider} API key: Not configured (coach replies will fail)"
        )
    if settings.auth_secret_key == "change-me-in-production":
        logger.warning("[Config] AUTH_SECRET_KEY is the default value; set it before deploying")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await init_db()
    check_api_keys()
    logger.info(
        f"[Startup] Catalog loaded: {len(CATALOG.modules)} modules, "
        f"{CATALOG.total_topics} topics"
    )
    yield


app = FastAPI(
    title="InnerCompass AI",
    description="Guided self-reflection through Values, Talents and Passions with an AI coach",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(topics_router, prefix="/api")
app.include_router(progress_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint returning API info."""
    return {
        "name": "InnerCompass AI API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "innercompass.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
