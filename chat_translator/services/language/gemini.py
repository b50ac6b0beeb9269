"""Google Gemini language provider implementation.

Uses the google-generativeai SDK for detection, translation and
summarization. Instantiated once in the FastAPI lifespan.
Every call has a 10-second request timeout and structured error logging.
"""

from __future__ import annotations

import json

import google.generativeai as genai
import structlog

from chat_translator.core.exceptions import UnsupportedLanguagePairError
from chat_translator.services.language.base import Detection, LanguageProvider

logger = structlog.get_logger(__name__)

_TIMEOUT_SECONDS = 10
_UNSUPPORTED_MARKER = "UNSUPPORTED"

DETECT_SYSTEM_PROMPT = (
    "You identify the language of text. Reply with a JSON array of at most "
    "three objects ordered from most to least likely, each shaped like "
    '{"language": "<BCP 47 tag>", "confidence": <number between 0 and 1>}. '
    "Reply with JSON only."
)

TRANSLATE_SYSTEM_PROMPT = (
    "You are a translation engine. Translate the user's text from {source} "
    "to {target}. Reply with the translation only, without quotes or notes. "
    f"If you cannot translate between these languages reply with exactly "
    f"{_UNSUPPORTED_MARKER}."
)

SUMMARIZE_SYSTEM_PROMPT = (
    "Summarize the user's text in two or three sentences, in the same "
    "language as the text. Reply with the summary only."
)


def parse_detections(raw: str) -> list[Detection]:
    """Parse the model's JSON reply into detection candidates.

    Tolerates markdown code fences around the JSON and a single object
    instead of an array.
    """
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    payload = json.loads(cleaned)
    if isinstance(payload, dict):
        payload = [payload]
    detections = []
    for item in payload:
        language = str(item.get("language", "")).strip()
        if not language:
            continue
        confidence = float(item.get("confidence", 0.0))
        detections.append(
            Detection(language=language, confidence=min(max(confidence, 0.0), 1.0))
        )
    return detections


class GeminiLanguageProvider(LanguageProvider):
    """Gemini Flash implementation of LanguageProvider."""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model_name = model
        if api_key:
            genai.configure(api_key=api_key)
        logger.info("gemini_language_provider_initialized", model=model)

    async def is_available(self) -> bool:
        return bool(self._api_key)

    def _build_model(self, system_prompt: str) -> genai.GenerativeModel:
        """Build a GenerativeModel with the given system instruction."""
        return genai.GenerativeModel(
            model_name=self._model_name,
            system_instruction=system_prompt,
        )

    async def _generate(self, prompt: str, system_prompt: str) -> str:
        model = self._build_model(system_prompt)
        generation_config = genai.GenerationConfig(temperature=0.0)
        response = await model.generate_content_async(
            prompt,
            generation_config=generation_config,
            request_options={"timeout": _TIMEOUT_SECONDS},
        )
        # response.text throws when Gemini returns no valid Part
        # (safety block, empty candidates).
        try:
            text = response.text
        except (ValueError, AttributeError):
            text = ""
            if response.candidates:
                for part in response.candidates[0].content.parts:
                    if getattr(part, "text", None):
                        text += part.text
        if not text.strip():
            raise RuntimeError("Gemini returned an empty response")
        return text.strip()

    async def detect(self, text: str) -> list[Detection]:
        raw = await self._generate(text, DETECT_SYSTEM_PROMPT)
        detections = parse_detections(raw)
        logger.debug(
            "gemini_detect_ok",
            text_len=len(text),
            language=detections[0].language if detections else None,
        )
        return detections

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str:
        system_prompt = TRANSLATE_SYSTEM_PROMPT.format(
            source=source_language, target=target_language
        )
        translated = await self._generate(text, system_prompt)
        if translated == _UNSUPPORTED_MARKER:
            raise UnsupportedLanguagePairError(source_language, target_language)
        logger.debug(
            "gemini_translate_ok",
            source_language=source_language,
            target_language=target_language,
            text_len=len(text),
        )
        return translated

    async def summarize(self, text: str) -> str:
        summary = await self._generate(text, SUMMARIZE_SYSTEM_PROMPT)
        logger.debug("gemini_summarize_ok", text_len=len(text), summary_len=len(summary))
        return summary
