"""Shared pytest fixtures for the chat translator test suite.

Provides:
  - MockLanguageProvider: scriptable LanguageProvider that records calls
    and can hold translate/summarize/detect calls open on asyncio.Event
    gates to exercise in-flight behaviour
  - mock_provider / client / controller fixtures wired together
  - wait_for_calls: yields to the event loop until a call count is reached

All external service calls are mocked in every test.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from chat_translator.services.language.base import Detection, LanguageProvider
from chat_translator.services.language.client import LanguageServiceClient
from chat_translator.services.pipeline.controller import PipelineController


LONG_ENGLISH_TEXT = (
    "The quarterly report shows steady growth across every region, with "
    "the strongest gains in the northern markets. Costs stayed flat while "
    "revenue rose, and the team expects the trend to continue next year."
)


class MockLanguageProvider(LanguageProvider):
    """Mock language provider for testing. Returns configurable responses."""

    def __init__(
        self,
        available: bool = True,
        default_detection: Detection | None = None,
    ) -> None:
        self.available = available
        self.default_detection = default_detection or Detection("en", 0.95)
        self.detections: dict[str, list[Detection]] = {}
        self.translations: dict[tuple[str, str], str] = {}
        self.summary_text = "A short summary."

        self.detect_error: Exception | None = None
        self.translate_error: Exception | None = None
        self.summarize_error: Exception | None = None

        self.detect_gate: asyncio.Event | None = None
        self.translate_gate: asyncio.Event | None = None
        self.summarize_gate: asyncio.Event | None = None

        self.probe_calls = 0
        self.detect_calls: list[str] = []
        self.translate_calls: list[dict[str, Any]] = []
        self.summarize_calls: list[str] = []
        self.closed = False

    async def is_available(self) -> bool:
        self.probe_calls += 1
        return self.available

    async def detect(self, text: str) -> list[Detection]:
        self.detect_calls.append(text)
        if self.detect_gate is not None:
            await self.detect_gate.wait()
        if self.detect_error is not None:
            raise self.detect_error
        return self.detections.get(text, [self.default_detection])

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str:
        self.translate_calls.append(
            {
                "text": text,
                "source_language": source_language,
                "target_language": target_language,
            }
        )
        if self.translate_gate is not None:
            await self.translate_gate.wait()
        if self.translate_error is not None:
            raise self.translate_error
        return self.translations.get(
            (text, target_language), f"[{target_language}] {text}"
        )

    async def summarize(self, text: str) -> str:
        self.summarize_calls.append(text)
        if self.summarize_gate is not None:
            await self.summarize_gate.wait()
        if self.summarize_error is not None:
            raise self.summarize_error
        return self.summary_text

    async def aclose(self) -> None:
        self.closed = True


async def wait_for_calls(
    count: Callable[[], int], expected: int, max_spins: int = 100
) -> None:
    """Yield to the event loop until count() reaches expected."""
    for _ in range(max_spins):
        if count() >= expected:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {expected} calls, saw {count()}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_provider() -> MockLanguageProvider:
    """Available mock provider detecting English at 0.95."""
    return MockLanguageProvider()


@pytest.fixture
def language_client(mock_provider: MockLanguageProvider) -> LanguageServiceClient:
    return LanguageServiceClient(mock_provider)


@pytest.fixture
def controller(language_client: LanguageServiceClient) -> PipelineController:
    """Controller with English default target, English summaries over 150 chars."""
    return PipelineController(
        client=language_client,
        target_language="en",
        summary_language="en",
        summary_min_chars=150,
    )
