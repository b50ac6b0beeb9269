"""Message pipeline endpoints.

A thin presentation boundary: every route reads pipeline state or invokes
exactly one PipelineController intent. Errors raised by the controller are
rendered by the ChatTranslatorError handler in main.py.
"""

from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Response, status

from chat_translator.api.deps import get_controller
from chat_translator.schemas.messages import (
    HealthResponse,
    LanguageOption,
    MessageResponse,
    MessageStatusResponse,
    PipelineStateResponse,
    SubmitMessageRequest,
    TargetLanguageRequest,
    TargetLanguageResponse,
    TranslateRequest,
)
from chat_translator.services.language.languages import TargetLanguage
from chat_translator.services.pipeline.controller import PipelineController
from chat_translator.services.pipeline.models import Message

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["messages"])


def _to_response(message: Message, controller: PipelineController) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        text=message.text,
        detected_language=message.detected_language,
        detection_confidence=message.detection_confidence,
        confidence_percent=message.confidence_percent,
        translations=dict(message.translations),
        summary=message.summary,
        status=MessageStatusResponse(
            translating=sorted(message.status.translating),
            summarizing=message.status.summarizing,
        ),
        is_translating=message.is_translating,
        can_summarize=controller.can_summarize(message),
        last_error=message.last_error,
        created_at=message.created_at,
    )


def _current_or_404(
    message: Message | None, message_id: UUID, controller: PipelineController
) -> MessageResponse:
    """Render the intent's result, falling back to the live message."""
    if message is None:
        message = controller.get_message(message_id)
    return _to_response(message, controller)


@router.get("/messages", response_model=PipelineStateResponse)
async def list_messages(
    controller: PipelineController = Depends(get_controller),
) -> PipelineStateResponse:
    """Full pipeline state: messages (newest first) and target selection."""
    return PipelineStateResponse(
        messages=[_to_response(m, controller) for m in controller.messages()],
        target_language=controller.target_language.value,
        capability_error=controller.capability_error,
        pending_submissions=controller.pending_submissions,
    )


@router.post(
    "/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_message(
    body: SubmitMessageRequest,
    controller: PipelineController = Depends(get_controller),
) -> MessageResponse:
    message = await controller.submit(body.text)
    return _to_response(message, controller)


@router.post("/messages/{message_id}/translate", response_model=MessageResponse)
async def translate_message(
    message_id: UUID,
    body: TranslateRequest | None = None,
    controller: PipelineController = Depends(get_controller),
) -> MessageResponse:
    """Translate a message. A duplicate in-flight request returns current state."""
    target = body.target_language if body is not None else None
    message = await controller.translate(message_id, target)
    return _current_or_404(message, message_id, controller)


@router.post("/messages/{message_id}/summarize", response_model=MessageResponse)
async def summarize_message(
    message_id: UUID,
    controller: PipelineController = Depends(get_controller),
) -> MessageResponse:
    message = await controller.summarize(message_id)
    return _current_or_404(message, message_id, controller)


@router.delete("/messages/{message_id}/translations", response_model=MessageResponse)
async def clear_translation(
    message_id: UUID,
    target_language: str | None = None,
    controller: PipelineController = Depends(get_controller),
) -> MessageResponse:
    """Clear one translation (?target_language=xx) or all of them."""
    message = controller.clear_translation(message_id, target_language)
    return _to_response(message, controller)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: UUID,
    controller: PipelineController = Depends(get_controller),
) -> Response:
    controller.delete(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/languages", response_model=list[LanguageOption])
async def list_languages() -> list[LanguageOption]:
    return [
        LanguageOption(code=language.value, name=language.display_name)
        for language in TargetLanguage
    ]


@router.get("/target-language", response_model=TargetLanguageResponse)
async def get_target_language(
    controller: PipelineController = Depends(get_controller),
) -> TargetLanguageResponse:
    return TargetLanguageResponse(target_language=controller.target_language.value)


@router.put("/target-language", response_model=TargetLanguageResponse)
async def set_target_language(
    body: TargetLanguageRequest,
    controller: PipelineController = Depends(get_controller),
) -> TargetLanguageResponse:
    language = controller.set_target_language(body.target_language)
    return TargetLanguageResponse(target_language=language.value)


@router.get("/health", response_model=HealthResponse)
async def health(
    controller: PipelineController = Depends(get_controller),
) -> HealthResponse:
    """Report capability availability, probing the provider on first call."""
    available = await controller.probe_capability()
    return HealthResponse(
        status="ok" if available else "degraded",
        language_service_available=available,
        capability_error=controller.capability_error,
    )
