# app/routers/chat_router.py
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.core.config import Settings, get_settings
from app.core.http import get_http_transport
from app.schemas.chat_schemas import ChatRequest, ChatResponse
from app.services import chat_service

router = APIRouter(prefix="/chat", tags=["Chat Assistant"])


@router.post("", response_model=ChatResponse)
async def chat_route(
    payload: ChatRequest,
    settings: Settings = Depends(get_settings),
    transport=Depends(get_http_transport),
):
    message = await chat_service.chat(payload.messages, settings, transport)
    return ChatResponse(message=message)


@router.post("/stream")
async def chat_stream_route(
    payload: ChatRequest,
    settings: Settings = Depends(get_settings),
    transport=Depends(get_http_transport),
):
    """
    Relays the upstream server-sent events as they arrive.
    """
    stream = await chat_service.open_chat_stream(payload.messages, settings, transport)
    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
