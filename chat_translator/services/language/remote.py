"""HTTP language service provider.

Talks to a self-hosted language service over JSON:

    GET  /health                                    -> 2xx when ready
    POST /detect     {"text"}                       -> [{"language", "confidence"}]
    POST /translate  {"text", "source_language",
                      "target_language"}            -> {"text"}  (422: unsupported pair)
    POST /summarize  {"text"}                       -> {"text"}
"""

from __future__ import annotations

import httpx
import structlog

from chat_translator.core.exceptions import UnsupportedLanguagePairError
from chat_translator.services.language.base import Detection, LanguageProvider

logger = structlog.get_logger(__name__)


class RemoteLanguageProvider(LanguageProvider):
    """LanguageProvider backed by an HTTP language service."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url, timeout=timeout_seconds
        )
        logger.info("remote_language_provider_initialized", base_url=self._base_url)

    async def is_available(self) -> bool:
        if not self._base_url:
            return False
        try:
            response = await self._client.get("/health")
        except httpx.HTTPError as e:
            logger.warning("remote_language_health_failed", error=str(e))
            return False
        return response.is_success

    async def detect(self, text: str) -> list[Detection]:
        response = await self._client.post("/detect", json={"text": text})
        response.raise_for_status()
        return [
            Detection(
                language=item["language"],
                confidence=float(item.get("confidence", 0.0)),
            )
            for item in response.json()
        ]

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str:
        response = await self._client.post(
            "/translate",
            json={
                "text": text,
                "source_language": source_language,
                "target_language": target_language,
            },
        )
        if response.status_code == 422:
            raise UnsupportedLanguagePairError(source_language, target_language)
        response.raise_for_status()
        return response.json()["text"]

    async def summarize(self, text: str) -> str:
        response = await self._client.post("/summarize", json={"text": text})
        response.raise_for_status()
        return response.json()["text"]

    async def aclose(self) -> None:
        await self._client.aclose()
