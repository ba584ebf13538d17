"""Main FastAPI application."""

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from babel_fish.api.dependencies import Gateway, verify_api_token
from babel_fish.api.v1.routes import sessions, tone, transcription, translation
from babel_fish.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Agent/customer chat translation with tone rewriting",
    version="0.1.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
auth = [Depends(verify_api_token)]
app.include_router(translation.router, prefix="/api/v1", tags=["translation"], dependencies=auth)
app.include_router(tone.router, prefix="/api/v1", tags=["tone"], dependencies=auth)
app.include_router(transcription.router, prefix="/api/v1", tags=["transcription"], dependencies=auth)
app.include_router(sessions.router, prefix="/api/v1", tags=["sessions"], dependencies=auth)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Babel Fish API", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/llm")
async def llm_health(gateway: Gateway):
    """Check that the language model endpoint answers."""
    reachable = await gateway.health_check()
    if not reachable:
        logger.warning("LLM endpoint %s is unreachable", gateway.model)
    return {"status": "healthy" if reachable else "unavailable", "model": gateway.model}
