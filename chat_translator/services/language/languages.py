"""Supported target languages: a fixed, closed enumeration."""

from __future__ import annotations

from enum import Enum


class TargetLanguage(str, Enum):
    ENGLISH = "en"
    PORTUGUESE = "pt"
    SPANISH = "es"
    RUSSIAN = "ru"
    TURKISH = "tr"
    FRENCH = "fr"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    TargetLanguage.ENGLISH: "English",
    TargetLanguage.PORTUGUESE: "Portuguese",
    TargetLanguage.SPANISH: "Spanish",
    TargetLanguage.RUSSIAN: "Russian",
    TargetLanguage.TURKISH: "Turkish",
    TargetLanguage.FRENCH: "French",
}


def parse_target_language(code: str) -> TargetLanguage | None:
    """Return the TargetLanguage for a wire code, or None if unsupported."""
    cleaned = code.strip().lower()
    for language in TargetLanguage:
        if language.value == cleaned:
            return language
    return None


def primary_language_subtag(tag: str) -> str:
    """Reduce a BCP 47 tag to its lowercase primary subtag ("en-US" -> "en")."""
    return tag.strip().replace("_", "-").split("-", 1)[0].lower()
