"""In-memory message store.

Single writer discipline: every mutation is an id-scoped patch applied
to the message as it exists at write time. A patch for an id that is no
longer present is a no-op, which is how completions of calls issued for
a since-deleted message get discarded.
"""

from __future__ import annotations

from typing import Callable, Iterator
from uuid import UUID

import structlog

from chat_translator.services.pipeline.models import Message

logger = structlog.get_logger(__name__)

MessagePatch = Callable[[Message], Message]


class MessageStore:
    """Ordered collection of messages keyed by id (newest first)."""

    def __init__(self) -> None:
        self._messages: dict[UUID, Message] = {}

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages

    def __iter__(self) -> Iterator[Message]:
        return iter(self.list())

    def insert(self, message: Message) -> Message:
        if message.id in self._messages:
            raise ValueError(f"Message id {message.id} already used")
        self._messages[message.id] = message
        logger.debug("message_inserted", message_id=str(message.id))
        return message

    def get(self, message_id: UUID) -> Message | None:
        return self._messages.get(message_id)

    def update(self, message_id: UUID, patch: MessagePatch) -> Message | None:
        """Apply *patch* to the current message with this id.

        Returns the updated message, or None if the id is gone.
        """
        current = self._messages.get(message_id)
        if current is None:
            logger.debug("message_update_skipped", message_id=str(message_id))
            return None
        updated = patch(current)
        if updated.id != current.id or updated.text != current.text:
            raise ValueError("A patch may not change a message's id or text")
        self._messages[message_id] = updated
        return updated

    def delete(self, message_id: UUID) -> bool:
        removed = self._messages.pop(message_id, None)
        if removed is not None:
            logger.debug("message_deleted", message_id=str(message_id))
        return removed is not None

    def list(self) -> list[Message]:
        """Messages newest first; insertion order decides, not in-flight state."""
        return list(reversed(self._messages.values()))
