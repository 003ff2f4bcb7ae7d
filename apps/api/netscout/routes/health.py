"""
Health check endpoint.

Used by:
  - Docker HEALTHCHECK instruction
  - Load balancers / orchestrators
  - Front-end to check API connectivity

Reports whether Gemini calls are real or mocked, so a scanner showing sample
cafés can be told apart from one that has a working key.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from netscout.ai import gemini_client as gemini_module

logger = logging.getLogger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    ai_mode: str  # "mock" | "real"
    environment: str


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    """Returns the liveness status of the API and its Gemini mode."""
    from netscout.core.config import settings

    # Access via module reference so tests can patch gemini_module.gemini_client
    ai_mode = "mock" if gemini_module.gemini_client.mock_mode else "real"

    return HealthResponse(
        status="ok",
        version="0.1.0",
        ai_mode=ai_mode,
        environment=settings.environment,
    )
