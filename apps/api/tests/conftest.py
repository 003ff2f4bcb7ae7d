"""
pytest configuration and shared fixtures for the NetScout API tests.

Key concern: tests must not require a Gemini API key or wait on the
simulated lookup delay. We achieve this by:
  1. Ensuring AI_MOCK_MODE=true so GeminiClient returns canned responses.
  2. Setting RETRIEVAL_DELAY_SECONDS=0 so password retrieval is instant.
  3. Giving every test a fresh ScanController via dependency_overrides, so
     scan state never leaks between tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["RETRIEVAL_DELAY_SECONDS"] = "0"
os.environ.pop("DEFAULT_LATITUDE", None)
os.environ.pop("DEFAULT_LONGITUDE", None)


class FakeGemini:
    """Stands in for GeminiClient: returns a fixed reply or raises."""

    def __init__(self, reply: str = "", exc: Exception | None = None) -> None:
        self.reply = reply
        self.exc = exc
        self.mock_mode = True
        self.calls: list[dict] = []

    async def generate(self, prompt, model=None, response_key="default", location=None):
        self.calls.append({"prompt": prompt, "response_key": response_key, "location": location})
        if self.exc is not None:
            raise self.exc
        return self.reply


@pytest.fixture()
def fake_gemini():
    return FakeGemini


@pytest.fixture()
def controller():
    """A fresh ScanController on the default (mock-mode) resolver."""
    from netscout.services.scan_state import ScanController

    return ScanController()


@pytest.fixture()
async def client(controller):
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from netscout.core.rate_limit import limiter
    from netscout.main import app
    from netscout.services.scan_state import get_scan_controller

    # Reset in-memory rate-limit counters so tests are independent.
    limiter.reset()

    app.dependency_overrides[get_scan_controller] = lambda: controller
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
