"""
Unit tests for GeminiClient.

Mock-mode tests need no API key. The real-mode tests replace the SDK client
with a stub, so they check what NetScout sends (Maps grounding, model name)
and how errors propagate, not Gemini's output.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from netscout.ai.gemini_client import GeminiClient
from netscout.models.hotspot import Coordinates

# ─── Mock mode ────────────────────────────────────────────────────────────────


class TestGeminiClientMockMode:
    """GeminiClient in mock mode (default in tests)."""

    def setup_method(self):
        # Force mock mode regardless of env
        import netscout.core.config as cfg

        self._original = cfg.settings.ai_mock_mode
        cfg.settings.ai_mock_mode = True
        self.client = GeminiClient()

    def teardown_method(self):
        import netscout.core.config as cfg

        cfg.settings.ai_mock_mode = self._original

    @pytest.mark.asyncio
    async def test_generate_returns_string(self):
        result = await self.client.generate("test prompt")
        assert isinstance(result, str)
        assert len(result) > 0

    @pytest.mark.asyncio
    async def test_nearby_hotspots_key_embeds_json_array(self):
        result = await self.client.generate("any prompt", response_key="nearby_hotspots")
        assert "[" in result and "]" in result
        assert "distanceValue" in result

    @pytest.mark.asyncio
    async def test_generate_unknown_key_returns_default(self):
        result = await self.client.generate("any prompt", response_key="nonexistent_key")
        assert "MOCK" in result

    @pytest.mark.asyncio
    async def test_location_is_ignored_in_mock_mode(self):
        result = await self.client.generate(
            "any prompt",
            response_key="nearby_hotspots",
            location=Coordinates(latitude=1.0, longitude=2.0),
        )
        assert "Blue Bottle Coffee" in result


class TestGeminiClientNoKey:
    """Real mode requested but no key — must degrade to mock mode."""

    def setup_method(self):
        import netscout.core.config as cfg

        self._original = (cfg.settings.ai_mock_mode, cfg.settings.gemini_api_key)
        cfg.settings.ai_mock_mode = False
        cfg.settings.gemini_api_key = ""

    def teardown_method(self):
        import netscout.core.config as cfg

        cfg.settings.ai_mock_mode, cfg.settings.gemini_api_key = self._original

    def test_falls_back_to_mock(self):
        assert GeminiClient().mock_mode is True


# ─── Real mode (SDK stubbed) ──────────────────────────────────────────────────


class TestGeminiClientRealMode:
    def setup_method(self):
        import netscout.core.config as cfg

        self._original = (cfg.settings.ai_mock_mode, cfg.settings.gemini_api_key)
        cfg.settings.ai_mock_mode = False
        cfg.settings.gemini_api_key = "test-key"

        self.sdk = MagicMock()
        self.sdk.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text="[]"))
        with patch("netscout.ai.gemini_client.genai.Client", return_value=self.sdk) as ctor:
            self.client = GeminiClient()
        self.ctor = ctor

    def teardown_method(self):
        import netscout.core.config as cfg

        cfg.settings.ai_mock_mode, cfg.settings.gemini_api_key = self._original

    def test_real_mode_uses_api_key(self):
        assert self.client.mock_mode is False
        self.ctor.assert_called_once_with(api_key="test-key")

    @pytest.mark.asyncio
    async def test_generate_returns_response_text(self):
        assert await self.client.generate("prompt") == "[]"

    @pytest.mark.asyncio
    async def test_none_text_becomes_empty_string(self):
        self.sdk.aio.models.generate_content.return_value = SimpleNamespace(text=None)
        assert await self.client.generate("prompt") == ""

    @pytest.mark.asyncio
    async def test_location_enables_maps_grounding(self):
        await self.client.generate("prompt", location=Coordinates(latitude=51.5, longitude=-0.12))

        kwargs = self.sdk.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        config = kwargs["config"]
        assert config.tools[0].google_maps is not None
        lat_lng = config.tool_config.retrieval_config.lat_lng
        assert (lat_lng.latitude, lat_lng.longitude) == (51.5, -0.12)

    @pytest.mark.asyncio
    async def test_no_location_sends_no_config(self):
        await self.client.generate("prompt", model="gemini-2.5-pro")

        kwargs = self.sdk.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["config"] is None

    @pytest.mark.asyncio
    async def test_sdk_errors_propagate(self):
        self.sdk.aio.models.generate_content.side_effect = RuntimeError("429 quota exceeded")
        with pytest.raises(RuntimeError, match="quota"):
            await self.client.generate("prompt")
