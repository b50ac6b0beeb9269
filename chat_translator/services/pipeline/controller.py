"""Pipeline controller: sequences language service calls per message.

PipelineController owns the message state machine:

    Created -> Detecting -> Detected -> {Translating <-> Detected,
                                         Summarizing <-> Detected} -> Deleted

Detecting happens before a message exists in the store; a message is only
inserted once detection succeeds. Translating is keyed by target language,
so a message can be translating into several languages at once, but never
twice into the same one.

Every completion re-resolves its message by id through MessageStore.update.
If the message was deleted while the call was in flight the write is a
no-op, so late results never resurrect or corrupt anything.

Rejections that happen before a service call (blank text, same language,
summary not offered) raise ValidationError. Failures of a service call on
an existing message are recorded on that message's last_error instead.
"""

from __future__ import annotations

from uuid import UUID

import structlog

from chat_translator.core.exceptions import (
    DetectionFailedError,
    MessageNotFoundError,
    ServiceUnavailableError,
    SummarizationFailedError,
    TranslationFailedError,
    ValidationError,
)
from chat_translator.services.language.client import LanguageServiceClient
from chat_translator.services.language.languages import (
    TargetLanguage,
    parse_target_language,
)
from chat_translator.services.pipeline.models import Message
from chat_translator.services.pipeline.store import MessageStore

logger = structlog.get_logger(__name__)

SAME_LANGUAGE_NOTICE = "Source and target languages are the same"
EMPTY_MESSAGE_NOTICE = "Message text must not be empty"
TRANSLATION_FAILED_NOTICE = "Translation failed. Please try another language pair."


class PipelineController:
    """Applies user intents to the message store."""

    def __init__(
        self,
        client: LanguageServiceClient,
        store: MessageStore | None = None,
        target_language: str = TargetLanguage.ENGLISH.value,
        summary_language: str = "en",
        summary_min_chars: int = 150,
    ) -> None:
        self._client = client
        self._store = store if store is not None else MessageStore()
        self._target_language = self._require_language(target_language)
        self._summary_language = summary_language
        self._summary_min_chars = summary_min_chars
        self._capability_error: str | None = None
        self._pending_submissions = 0

    # ------------------------------------------------------------------
    # Read access for the presentation layer
    # ------------------------------------------------------------------

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def target_language(self) -> TargetLanguage:
        return self._target_language

    @property
    def capability_error(self) -> str | None:
        """Persistent pipeline-wide error once the capability is found missing."""
        return self._capability_error

    @property
    def pending_submissions(self) -> int:
        """Submissions currently waiting on detection."""
        return self._pending_submissions

    def messages(self) -> list[Message]:
        return self._store.list()

    def get_message(self, message_id: UUID) -> Message:
        message = self._store.get(message_id)
        if message is None:
            raise MessageNotFoundError()
        return message

    async def probe_capability(self) -> bool:
        """Check once whether language services exist; latch the error if not."""
        try:
            await self._client.ensure_available()
        except ServiceUnavailableError as e:
            self._latch_capability_error(e)
            return False
        return True

    def can_summarize(self, message: Message) -> bool:
        """Summaries are offered only for long text in the summary language."""
        return (
            message.detected_language == self._summary_language
            and len(message.text) > self._summary_min_chars
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def set_target_language(self, code: str) -> TargetLanguage:
        self._target_language = self._require_language(code)
        logger.debug("target_language_set", target_language=code)
        return self._target_language

    async def submit(self, text: str) -> Message:
        """Detect the language of *text* and insert it as a new message.

        Raises:
            ValidationError: Text is blank. No service call is made.
            ServiceUnavailableError: Capability missing; latched pipeline-wide.
            DetectionFailedError: Detection failed; nothing is inserted.
        """
        if not text or not text.strip():
            raise ValidationError(EMPTY_MESSAGE_NOTICE)
        self._check_capability()

        self._pending_submissions += 1
        try:
            detection = await self._client.detect(text.strip())
        except ServiceUnavailableError as e:
            self._latch_capability_error(e)
            raise
        except DetectionFailedError:
            logger.warning("submit_detection_failed", text_len=len(text))
            raise
        finally:
            self._pending_submissions -= 1

        message = self._store.insert(
            Message(
                text=text,
                detected_language=detection.language,
                detection_confidence=detection.confidence,
            )
        )
        logger.info(
            "message_submitted",
            message_id=str(message.id),
            detected_language=detection.language,
            confidence=detection.confidence,
        )
        return message

    async def translate(
        self, message_id: UUID, target_language: str | None = None
    ) -> Message | None:
        """Translate a message into *target_language* (default: current selection).

        The target is captured now, so a selection change while the call is
        in flight never redirects the result to another language.

        Returns the updated message, or None when the request was ignored
        (same translation already in flight) or the message was deleted
        before the call completed.
        """
        target = (
            self._require_language(target_language)
            if target_language is not None
            else self._target_language
        ).value
        message = self.get_message(message_id)

        if target in message.status.translating:
            logger.debug(
                "translate_already_in_flight",
                message_id=str(message_id),
                target_language=target,
            )
            return None
        if message.detected_language == target:
            raise ValidationError(SAME_LANGUAGE_NOTICE)
        self._check_capability()

        self._store.update(message_id, lambda m: m.start_translation(target))
        try:
            translated = await self._client.translate(
                message.text.strip(), message.detected_language, target
            )
        except ServiceUnavailableError as e:
            self._latch_capability_error(e)
            return self._store.update(
                message_id, lambda m: m.finish_translation(target, error=e.message)
            )
        except TranslationFailedError as e:
            logger.warning(
                "translate_failed",
                message_id=str(message_id),
                target_language=target,
                code=e.code,
            )
            return self._store.update(
                message_id,
                lambda m: m.finish_translation(target, error=TRANSLATION_FAILED_NOTICE),
            )
        except BaseException:
            # Cancellation or an unexpected error: release the flag so the
            # user can retry, then propagate.
            self._store.update(message_id, lambda m: m.abandon_translation(target))
            raise

        updated = self._store.update(
            message_id, lambda m: m.finish_translation(target, translated=translated)
        )
        if updated is None:
            logger.info(
                "translate_result_discarded",
                message_id=str(message_id),
                target_language=target,
            )
        else:
            logger.info(
                "message_translated",
                message_id=str(message_id),
                target_language=target,
            )
        return updated

    async def summarize(self, message_id: UUID) -> Message | None:
        """Summarize a long message written in the summary language.

        Returns the updated message, the unchanged message if it already has
        a summary, or None if a summary is in flight or the message was
        deleted before the call completed.
        """
        message = self.get_message(message_id)
        if not self.can_summarize(message):
            raise ValidationError(
                f"Summaries are only available for '{self._summary_language}' "
                f"messages longer than {self._summary_min_chars} characters"
            )
        if message.status.summarizing:
            return None
        if message.summary is not None:
            return message
        self._check_capability()

        self._store.update(message_id, lambda m: m.start_summary())
        try:
            summary = await self._client.summarize(message.text)
        except ServiceUnavailableError as e:
            self._latch_capability_error(e)
            return self._store.update(
                message_id, lambda m: m.finish_summary(error=e.message)
            )
        except SummarizationFailedError as e:
            logger.warning("summarize_failed", message_id=str(message_id))
            return self._store.update(
                message_id, lambda m: m.finish_summary(error=e.message)
            )
        except BaseException:
            self._store.update(message_id, lambda m: m.abandon_summary())
            raise

        updated = self._store.update(
            message_id, lambda m: m.finish_summary(summary=summary)
        )
        if updated is not None:
            logger.info("message_summarized", message_id=str(message_id))
        return updated

    def clear_translation(
        self, message_id: UUID, target_language: str | None = None
    ) -> Message:
        """Remove one translation, or every translation when no language is given."""
        if target_language is not None:
            target_language = self._require_language(target_language).value
        self.get_message(message_id)
        updated = self._store.update(
            message_id, lambda m: m.without_translation(target_language)
        )
        logger.debug(
            "translation_cleared",
            message_id=str(message_id),
            target_language=target_language,
        )
        return updated

    def delete(self, message_id: UUID) -> None:
        """Remove a message now; in-flight calls for it complete as no-ops."""
        if not self._store.delete(message_id):
            raise MessageNotFoundError()
        logger.info("message_deleted", message_id=str(message_id))

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_language(code: str) -> TargetLanguage:
        language = parse_target_language(code)
        if language is None:
            raise ValidationError(f"Unsupported target language '{code}'")
        return language

    def _check_capability(self) -> None:
        if self._capability_error is not None:
            raise ServiceUnavailableError(self._capability_error)

    def _latch_capability_error(self, error: ServiceUnavailableError) -> None:
        if self._capability_error is None:
            logger.error("language_capability_missing", error=error.message)
        self._capability_error = error.message
