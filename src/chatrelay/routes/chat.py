import logging

import air
from air.responses import Response
from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from chatrelay.hub import hub
from chatrelay.schemas import ChatMessageIn
from chatrelay.settings import settings
from chatrelay.sse import event_stream

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.get("/chat")
async def send_chat(request: air.Request, message: str):
    delivered = hub.publish(message)
    logger.debug("Chat message relayed to %d subscriber(s)", delivered)
    return Response("", 200)


@router.post("/chat")
async def post_chat(request: air.Request, data: ChatMessageIn):
    hub.publish(data.message)
    return Response("", 200)


@router.get("/sse")
async def chat_stream(request: air.Request):
    async def generator():
        with hub.listen() as subscriber:
            async for frame in event_stream(
                subscriber,
                request.is_disconnected,
                keepalive=settings.sse_keepalive_seconds,
            ):
                yield frame

    return StreamingResponse(
        generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "Connection": "keep-alive",
        },
    )
