# builder_chat/routers/chat.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — /api router
---------------------------------
HTTP endpoints used by the browser UI.

Flow:
  POST /api/chat   { message, sessionId? }
    -> ChatOrchestrator.handle_turn(sessionId, message)
    -> { reply, sessionId }

  POST /api/clear  { sessionId }
    -> ChatOrchestrator.clear_session(sessionId)
    -> { success: true }

Errors use a flat body rather than FastAPI's `detail` wrapper:
    400 { "error": "..." }
    500 { "error": "...", "details": "..." }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from builder_chat.core.errors import InvalidInput
from builder_chat.core.pipeline import ChatOrchestrator, get_orchestrator
from builder_chat.models.chat_request import ChatRequest, ClearRequest
from builder_chat.models.chat_response import ChatResponse, ClearResponse, ErrorResponse

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_endpoint(
    request: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    """
    Run one chat turn.

    A missing `sessionId` starts a new session; the allocated key is
    returned so the client can send it with the next message.
    """
    logger.info("[/api/chat] session_id=%s text=%r", request.session_id, request.message)

    try:
        result = await orchestrator.handle_turn(request.session_id, request.message)
    except InvalidInput as exc:
        return error_response(400, str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in /api/chat")
        return error_response(500, "Failed to process chat message", str(exc))

    response = ChatResponse(reply=result.reply_text, session_id=result.session_key)
    return JSONResponse(content=response.model_dump(by_alias=True))


@router.post(
    "/clear",
    response_model=ClearResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def clear_endpoint(
    request: ClearRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    """Delete the stored conversation for `sessionId`."""
    logger.info("[/api/clear] session_id=%s", request.session_id)

    try:
        await orchestrator.clear_session(request.session_id)
    except InvalidInput as exc:
        return error_response(400, str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in /api/clear")
        return error_response(500, "Failed to clear conversation", str(exc))

    return ClearResponse(success=True)
