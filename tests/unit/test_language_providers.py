"""Unit tests for the concrete language providers.

Tests:
  - parse_detections: plain JSON array, fenced JSON, single object,
    confidence clamped, blank languages skipped
  - GeminiLanguageProvider: availability follows the API key; detect /
    translate / summarize go through GenerativeModel; UNSUPPORTED reply
    maps to UnsupportedLanguagePairError; empty replies raise
  - RemoteLanguageProvider: health probe, JSON endpoints, 422 maps to
    UnsupportedLanguagePairError, other HTTP errors raise
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from chat_translator.core.exceptions import UnsupportedLanguagePairError
from chat_translator.services.language import gemini as gemini_module
from chat_translator.services.language.base import Detection
from chat_translator.services.language.gemini import (
    GeminiLanguageProvider,
    parse_detections,
)
from chat_translator.services.language.remote import RemoteLanguageProvider


class TestParseDetections:
    def test_plain_array(self) -> None:
        raw = '[{"language": "es", "confidence": 0.91}, {"language": "pt", "confidence": 0.05}]'
        assert parse_detections(raw) == [Detection("es", 0.91), Detection("pt", 0.05)]

    def test_fenced_json(self) -> None:
        raw = '```json\n[{"language": "fr", "confidence": 0.8}]\n```'
        assert parse_detections(raw) == [Detection("fr", 0.8)]

    def test_single_object(self) -> None:
        assert parse_detections('{"language": "ru", "confidence": 0.7}') == [
            Detection("ru", 0.7)
        ]

    def test_confidence_clamped_and_blank_skipped(self) -> None:
        raw = '[{"language": "", "confidence": 0.5}, {"language": "tr", "confidence": 1.7}]'
        assert parse_detections(raw) == [Detection("tr", 1.0)]

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_detections("I think it is Spanish")


class _FakeModel:
    """Stands in for genai.GenerativeModel; replies are queued per test."""

    replies: list[Any] = []
    calls: list[dict[str, Any]] = []

    def __init__(self, model_name: str, system_instruction: str) -> None:
        self.model_name = model_name
        self.system_instruction = system_instruction

    async def generate_content_async(self, prompt: str, **kwargs: Any) -> Any:
        _FakeModel.calls.append(
            {"prompt": prompt, "system_instruction": self.system_instruction}
        )
        return _FakeModel.replies.pop(0)


@pytest.fixture
def fake_gemini(monkeypatch: pytest.MonkeyPatch) -> type[_FakeModel]:
    _FakeModel.replies = []
    _FakeModel.calls = []
    monkeypatch.setattr(gemini_module.genai, "GenerativeModel", _FakeModel)
    monkeypatch.setattr(gemini_module.genai, "GenerationConfig", lambda **kw: kw)
    monkeypatch.setattr(gemini_module.genai, "configure", lambda **kw: None)
    return _FakeModel


def _reply(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, candidates=[])


class TestGeminiLanguageProvider:
    @pytest.mark.asyncio
    async def test_availability_follows_api_key(self, fake_gemini: Any) -> None:
        assert await GeminiLanguageProvider(api_key="").is_available() is False
        assert await GeminiLanguageProvider(api_key="key").is_available() is True

    @pytest.mark.asyncio
    async def test_detect(self, fake_gemini: Any) -> None:
        fake_gemini.replies.append(_reply('[{"language": "en", "confidence": 0.95}]'))
        provider = GeminiLanguageProvider(api_key="key")

        assert await provider.detect("Hello world") == [Detection("en", 0.95)]
        assert fake_gemini.calls[0]["prompt"] == "Hello world"

    @pytest.mark.asyncio
    async def test_translate(self, fake_gemini: Any) -> None:
        fake_gemini.replies.append(_reply("Hola mundo\n"))
        provider = GeminiLanguageProvider(api_key="key")

        assert await provider.translate("Hello world", "en", "es") == "Hola mundo"
        instruction = fake_gemini.calls[0]["system_instruction"]
        assert "from en to es" in instruction

    @pytest.mark.asyncio
    async def test_translate_unsupported_pair(self, fake_gemini: Any) -> None:
        fake_gemini.replies.append(_reply("UNSUPPORTED"))
        provider = GeminiLanguageProvider(api_key="key")

        with pytest.raises(UnsupportedLanguagePairError):
            await provider.translate("Hello", "en", "tr")

    @pytest.mark.asyncio
    async def test_summarize(self, fake_gemini: Any) -> None:
        fake_gemini.replies.append(_reply("Growth everywhere."))
        provider = GeminiLanguageProvider(api_key="key")
        assert await provider.summarize("A long report...") == "Growth everywhere."

    @pytest.mark.asyncio
    async def test_blocked_response_raises(self, fake_gemini: Any) -> None:
        blocked = SimpleNamespace(candidates=[])
        fake_gemini.replies.append(blocked)
        provider = GeminiLanguageProvider(api_key="key")

        with pytest.raises(RuntimeError):
            await provider.summarize("Something")


def _remote(handler: Any) -> RemoteLanguageProvider:
    client = httpx.AsyncClient(
        base_url="http://lang.test", transport=httpx.MockTransport(handler)
    )
    return RemoteLanguageProvider(base_url="http://lang.test", client=client)


class TestRemoteLanguageProvider:
    @pytest.mark.asyncio
    async def test_health_check(self) -> None:
        provider = _remote(lambda request: httpx.Response(200, json={"status": "ok"}))
        assert await provider.is_available() is True

        down = _remote(lambda request: httpx.Response(503))
        assert await down.is_available() is False

    @pytest.mark.asyncio
    async def test_health_check_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert await _remote(handler).is_available() is False

    @pytest.mark.asyncio
    async def test_no_url_is_unavailable(self) -> None:
        provider = RemoteLanguageProvider(base_url="")
        assert await provider.is_available() is False
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_detect_and_translate(self) -> None:
        seen: list[tuple[str, dict]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append((request.url.path, body))
            if request.url.path == "/detect":
                return httpx.Response(200, json=[{"language": "en", "confidence": 0.95}])
            return httpx.Response(200, json={"text": "Hola mundo"})

        provider = _remote(handler)
        assert await provider.detect("Hello world") == [Detection("en", 0.95)]
        assert await provider.translate("Hello world", "en", "es") == "Hola mundo"
        assert seen[1] == (
            "/translate",
            {"text": "Hello world", "source_language": "en", "target_language": "es"},
        )

    @pytest.mark.asyncio
    async def test_translate_422_is_unsupported_pair(self) -> None:
        provider = _remote(lambda request: httpx.Response(422, json={"detail": "pair"}))
        with pytest.raises(UnsupportedLanguagePairError):
            await provider.translate("Hello", "en", "tr")

    @pytest.mark.asyncio
    async def test_server_error_raises(self) -> None:
        provider = _remote(lambda request: httpx.Response(500))
        with pytest.raises(httpx.HTTPStatusError):
            await provider.summarize("text")
