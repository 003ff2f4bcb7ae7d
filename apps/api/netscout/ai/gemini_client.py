"""
GeminiClient — Async wrapper around the Google Gen AI SDK.

The hotspot resolver is the only caller. It needs Google Maps grounding
bound to the device's coordinates, which is why this wraps `google-genai`
(client.aio.models.generate_content) rather than the older
google-generativeai package.

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode (default): returns deterministic canned responses.
    Use for tests and local dev without API keys.
  - REAL mode: makes actual Gemini API calls.
    Requires GEMINI_API_KEY to be set.

Extension pattern: add new mock response keys to _MOCK_RESPONSES and
reference them in generate() calls via the response_key parameter.
"""

import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from netscout.core.config import settings
from netscout.models.hotspot import Coordinates

logger = logging.getLogger(__name__)


# Canned responses for mock mode.
# Keys map to response_key arguments in generate() calls.
_MOCK_RESPONSES: dict[str, str] = {
    "default": (
        "[MOCK] This is a placeholder Gemini response. "
        "Set AI_MOCK_MODE=false and provide GEMINI_API_KEY for real responses."
    ),
    # Shaped like a real grounded answer: prose around a fenced JSON array.
    "nearby_hotspots": (
        "Here are some public places with Wi-Fi near you:\n\n"
        "```json\n"
        "[\n"
        '  {"name": "Blue Bottle Coffee", "address": "1 Ferry Building, San Francisco", '
        '"distanceValue": 120, "type": "Cafe", "security": "WPA2", "password": "pourover2024"},\n'
        '  {"name": "SF Public Library - Main", "address": "100 Larkin St, San Francisco", '
        '"distanceValue": 340, "type": "Library", "security": "Open", "password": "None"},\n'
        '  {"name": "Embarcadero Station", "address": "298 Market St, San Francisco", '
        '"distanceValue": 210, "type": "Transit", "security": "Public", "password": "None"},\n'
        '  {"name": "WeWork Guest", "address": "600 California St, San Francisco", '
        '"distanceValue": 560, "type": "Other", "security": "Enterprise", "password": "None"},\n'
        '  {"name": "Philz Coffee", "address": "5 Embarcadero Center, San Francisco", '
        '"distanceValue": 80, "type": "Cafe", "password": "mintmojito"},\n'
        '  {"name": "Justin Herman Plaza", "address": "Market St & Steuart St, San Francisco", '
        '"distanceValue": 150, "type": "Public Space", "security": "Public", "password": "None"},\n'
        '  {"name": "Sightglass Coffee", "address": "270 7th St, San Francisco", '
        '"distanceValue": 900, "type": "Cafe", "security": "WPA3", "password": "None"},\n'
        '  {"name": "Salesforce Transit Center", "address": "425 Mission St, San Francisco", '
        '"distanceValue": 450, "type": "Transit", "security": "Open", "password": "None"}\n'
        "]\n"
        "```\n\n"
        "Passwords are community-shared and may have changed."
    ),
}


class GeminiClient:
    """
    Central Gemini interface for NetScout.

    Don't instantiate per-request; use the module-level `gemini_client`
    singleton.
    """

    def __init__(self) -> None:
        self.mock_mode = settings.ai_mock_mode
        self._client: Optional[genai.Client] = None

        if not self.mock_mode:
            if not settings.gemini_api_key:
                logger.warning(
                    "GEMINI_API_KEY not set — falling back to mock mode. "
                    "Set AI_MOCK_MODE=true to silence this warning."
                )
                self.mock_mode = True
            else:
                self._client = genai.Client(api_key=settings.gemini_api_key)

        if self.mock_mode:
            logger.info("GeminiClient initialised in MOCK mode")
        else:
            logger.info("GeminiClient initialised in REAL mode (model: %s)", settings.gemini_model)

    @staticmethod
    def _maps_grounding(location: Coordinates) -> dict[str, Any]:
        """Google Maps tool plus a retrieval config pinned to *location*."""
        return {
            "tools": [types.Tool(google_maps=types.GoogleMaps())],
            "tool_config": types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=location.latitude,
                        longitude=location.longitude,
                    )
                )
            ),
        }

    async def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        response_key: str = "default",
        location: Optional[Coordinates] = None,
    ) -> str:
        """
        Generate text from a Gemini model.

        Args:
            prompt:       The full prompt string.
            model:        Model name; defaults to settings.gemini_model.
            response_key: Mock response key (ignored in real mode).
            location:     When given, enables Google Maps grounding around it.

        Returns:
            Generated text string ("" if the model returned no text part).

        Raises:
            Exception: Propagates Gemini SDK errors in real mode.
        """
        if self.mock_mode:
            return _MOCK_RESPONSES.get(response_key, _MOCK_RESPONSES["default"])

        model_name = model or settings.gemini_model
        config = None
        if location is not None:
            config = types.GenerateContentConfig(**self._maps_grounding(location))

        try:
            response = await self._client.aio.models.generate_content(
                model=model_name,
                contents=prompt,
                config=config,
            )
            return response.text or ""
        except Exception as exc:
            logger.error("Gemini API error (model=%s): %s", model_name, exc)
            raise


# Module-level singleton — import and use this everywhere
gemini_client = GeminiClient()
