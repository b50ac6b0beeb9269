"""Message request/response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SubmitMessageRequest(BaseModel):
    """POST /v1/messages request body."""

    text: str


class TranslateRequest(BaseModel):
    """POST /v1/messages/{message_id}/translate request body.

    target_language falls back to the pipeline's current selection.
    """

    target_language: str | None = None


class TargetLanguageRequest(BaseModel):
    """PUT /v1/target-language request body."""

    target_language: str


class MessageStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    translating: list[str] = []
    summarizing: bool = False


class MessageResponse(BaseModel):
    """A message with all derived detection/translation state."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    text: str
    detected_language: str | None = None
    detection_confidence: float = 0.0
    confidence_percent: float = 0.0
    translations: dict[str, str] = {}
    summary: str | None = None
    status: MessageStatusResponse
    is_translating: bool = False
    can_summarize: bool = False
    last_error: str | None = None
    created_at: datetime


class LanguageOption(BaseModel):
    code: str
    name: str


class PipelineStateResponse(BaseModel):
    """GET /v1/messages response body."""

    messages: list[MessageResponse] = []
    target_language: str
    capability_error: str | None = None
    pending_submissions: int = 0


class TargetLanguageResponse(BaseModel):
    target_language: str


class HealthResponse(BaseModel):
    status: str
    language_service_available: bool = False
    capability_error: str | None = None
