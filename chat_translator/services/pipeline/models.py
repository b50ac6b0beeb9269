"""Message entity: one submitted text plus all derived language state."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Mapping


@dataclass(frozen=True)
class MessageStatus:
    """Per-operation in-flight flags.

    translating holds the target language codes with a call in flight.
    """

    translating: frozenset[str] = frozenset()
    summarizing: bool = False


@dataclass(frozen=True)
class Message:
    """Immutable snapshot of a message. Mutations go through MessageStore.update."""

    text: str
    detected_language: str | None = None
    detection_confidence: float = 0.0
    translations: Mapping[str, str] = field(default_factory=dict)
    summary: str | None = None
    status: MessageStatus = field(default_factory=MessageStatus)
    last_error: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_translating(self) -> bool:
        return bool(self.status.translating)

    @property
    def confidence_percent(self) -> float:
        return round(self.detection_confidence * 100, 1)

    # --- patch helpers (pure: each returns a new Message) ---

    def start_translation(self, target_language: str) -> Message:
        return replace(
            self,
            status=replace(
                self.status,
                translating=self.status.translating | {target_language},
            ),
        )

    def finish_translation(
        self,
        target_language: str,
        translated: str | None = None,
        error: str | None = None,
    ) -> Message:
        """Clear the in-flight flag and merge either the result or the error."""
        status = replace(
            self.status,
            translating=self.status.translating - {target_language},
        )
        if error is not None:
            return replace(self, status=status, last_error=error)
        translations = dict(self.translations)
        translations[target_language] = translated
        return replace(
            self, status=status, translations=translations, last_error=None
        )

    def abandon_translation(self, target_language: str) -> Message:
        """Clear the in-flight flag without recording a result or error."""
        return replace(
            self,
            status=replace(
                self.status,
                translating=self.status.translating - {target_language},
            ),
        )

    def start_summary(self) -> Message:
        return replace(self, status=replace(self.status, summarizing=True))

    def abandon_summary(self) -> Message:
        return replace(self, status=replace(self.status, summarizing=False))

    def finish_summary(
        self, summary: str | None = None, error: str | None = None
    ) -> Message:
        status = replace(self.status, summarizing=False)
        if error is not None:
            return replace(self, status=status, last_error=error)
        return replace(self, status=status, summary=summary, last_error=None)

    def without_translation(self, target_language: str | None = None) -> Message:
        """Drop one translation, or all of them when no language is given."""
        if target_language is None:
            return replace(self, translations={})
        translations = {
            lang: text
            for lang, text in self.translations.items()
            if lang != target_language
        }
        return replace(self, translations=translations)
