"""Language service client: the pipeline's only view of language capabilities.

Wraps a LanguageProvider and guarantees that every failure surfaces as one
of the distinguished error types:

- ServiceUnavailableError: capability missing (probed once, then cached)
- DetectionFailedError / TranslationFailedError / UnsupportedLanguagePairError
  / SummarizationFailedError: a single call failed
"""

from __future__ import annotations

import asyncio

import structlog

from chat_translator.core.exceptions import (
    DetectionFailedError,
    ServiceUnavailableError,
    SummarizationFailedError,
    TranslationFailedError,
    UnsupportedLanguagePairError,
)
from chat_translator.services.language.base import Detection, LanguageProvider
from chat_translator.services.language.languages import primary_language_subtag

logger = structlog.get_logger(__name__)


class LanguageServiceClient:
    """Adapter over a LanguageProvider with a one-time availability probe."""

    def __init__(self, provider: LanguageProvider) -> None:
        self._provider = provider
        self._available: bool | None = None
        self._probe_lock = asyncio.Lock()

    @property
    def provider(self) -> LanguageProvider:
        return self._provider

    @property
    def probed(self) -> bool:
        return self._available is not None

    async def ensure_available(self) -> None:
        """Probe the provider on first use; raise if the capability is missing.

        The probe result is cached, so a missing capability fails fast on
        every later call without hitting the provider again.
        """
        if self._available is None:
            async with self._probe_lock:
                if self._available is None:
                    try:
                        self._available = bool(await self._provider.is_available())
                    except Exception as e:
                        logger.warning(
                            "language_provider_probe_failed",
                            provider=type(self._provider).__name__,
                            error=str(e),
                        )
                        self._available = False
                    logger.info(
                        "language_provider_probed",
                        provider=type(self._provider).__name__,
                        available=self._available,
                    )
        if not self._available:
            raise ServiceUnavailableError()

    async def detect(self, text: str) -> Detection:
        """Detect the language of *text*; the first candidate is authoritative.

        The tag is reduced to its lowercase primary subtag so it compares
        directly with TargetLanguage codes.
        """
        if not text or not text.strip():
            raise ValueError("detect() requires non-empty text")
        await self.ensure_available()
        try:
            candidates = await self._provider.detect(text)
        except Exception as e:
            logger.error("language_detect_failed", error=str(e), text_len=len(text))
            raise DetectionFailedError() from e
        if not candidates:
            logger.warning("language_detect_empty", text_len=len(text))
            raise DetectionFailedError("Could not determine the message language")
        best = candidates[0]
        language = primary_language_subtag(best.language)
        if not language:
            raise DetectionFailedError("Could not determine the message language")
        return Detection(language=language, confidence=best.confidence)

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str:
        """Translate *text*. Equal source and target is a caller error."""
        if source_language == target_language:
            raise ValueError(
                "translate() called with identical source and target language"
            )
        await self.ensure_available()
        try:
            return await self._provider.translate(text, source_language, target_language)
        except UnsupportedLanguagePairError:
            logger.info(
                "language_pair_unsupported",
                source_language=source_language,
                target_language=target_language,
            )
            raise
        except Exception as e:
            logger.error(
                "language_translate_failed",
                error=str(e),
                source_language=source_language,
                target_language=target_language,
            )
            raise TranslationFailedError() from e

    async def summarize(self, text: str) -> str:
        await self.ensure_available()
        try:
            return await self._provider.summarize(text)
        except Exception as e:
            logger.error("language_summarize_failed", error=str(e), text_len=len(text))
            raise SummarizationFailedError() from e

    async def aclose(self) -> None:
        await self._provider.aclose()
