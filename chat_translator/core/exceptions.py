"""Custom exception classes for structured error handling."""

from typing import Any


class ChatTranslatorError(Exception):
    """Base exception for all chat translator errors."""

    def __init__(self, code: str, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(ChatTranslatorError):
    """Intent rejected before any service call (blank input, same language...)."""

    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(code="VALIDATION_ERROR", message=message, status_code=422)


class MessageNotFoundError(ChatTranslatorError):
    def __init__(self, message: str = "Message not found") -> None:
        super().__init__(code="MESSAGE_NOT_FOUND", message=message, status_code=404)


class ServiceUnavailableError(ChatTranslatorError):
    """The language capability is missing from the environment altogether."""

    def __init__(
        self,
        message: str = "Language services are not available in this environment.",
    ) -> None:
        super().__init__(code="SERVICE_UNAVAILABLE", message=message, status_code=503)


class DetectionFailedError(ChatTranslatorError):
    def __init__(self, message: str = "Language detection failed") -> None:
        super().__init__(code="DETECTION_FAILED", message=message, status_code=502)


class TranslationFailedError(ChatTranslatorError):
    def __init__(
        self,
        message: str = "Translation failed. Please try another language pair.",
        code: str = "TRANSLATION_FAILED",
        status_code: int = 502,
    ) -> None:
        super().__init__(code=code, message=message, status_code=status_code)


class UnsupportedLanguagePairError(TranslationFailedError):
    def __init__(self, source_language: str, target_language: str) -> None:
        self.source_language = source_language
        self.target_language = target_language
        super().__init__(
            message=(
                f"Translation from '{source_language}' to '{target_language}' "
                "is not supported"
            ),
            code="UNSUPPORTED_LANGUAGE_PAIR",
            status_code=422,
        )


class SummarizationFailedError(ChatTranslatorError):
    def __init__(self, message: str = "Summarization failed") -> None:
        super().__init__(code="SUMMARIZATION_FAILED", message=message, status_code=502)
