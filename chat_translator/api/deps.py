"""Shared FastAPI dependencies: service injection.

The PipelineController is created once during the FastAPI lifespan and
stored on app.state. All routes retrieve it via Depends(), never by
direct import, so the message store is shared by every request.
"""

from fastapi import Request

from chat_translator.services.pipeline.controller import PipelineController


def get_controller(request: Request) -> PipelineController:
    """Return the singleton PipelineController from app state."""
    return request.app.state.controller
