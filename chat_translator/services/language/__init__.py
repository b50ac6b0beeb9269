"""Language capability providers and the client the pipeline talks to."""

from chat_translator.services.language.base import Detection, LanguageProvider
from chat_translator.services.language.client import LanguageServiceClient

__all__ = ["Detection", "LanguageProvider", "LanguageServiceClient"]
