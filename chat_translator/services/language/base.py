"""Abstract language provider interface.

All language capability implementations must inherit from this class.
Business logic never talks to a concrete provider directly: the pipeline
goes through LanguageServiceClient, which normalizes provider failures
into the distinguished error types in app exceptions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Detection:
    """A single language detection candidate."""

    language: str
    confidence: float = 0.0

    @property
    def confidence_percent(self) -> float:
        return round(self.confidence * 100, 1)


class LanguageProvider(ABC):
    """Abstract base class for detection/translation/summarization providers."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Return True if the underlying capability exists in this environment.

        Called once by the client before first use; must not raise.
        """
        ...

    @abstractmethod
    async def detect(self, text: str) -> list[Detection]:
        """Detect the language of *text*.

        Returns:
            Candidates ordered by confidence, most likely first.

        Raises:
            Exception: Any provider failure. The client maps it to
                DetectionFailedError.
        """
        ...

    @abstractmethod
    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str:
        """Translate *text* between two language tags.

        Raises:
            UnsupportedLanguagePairError: If the provider rejects the pair.
            Exception: Any other failure (mapped to TranslationFailedError).
        """
        ...

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """Summarize *text*.

        Raises:
            Exception: Any failure (mapped to SummarizationFailedError).
        """
        ...

    async def aclose(self) -> None:
        """Release provider resources. Default: nothing to release."""
        return None
