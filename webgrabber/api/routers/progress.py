import asyncio

from fastapi import APIRouter, Request
from starlette.responses import StreamingResponse

from webgrabber.services.progress_broadcaster import ProgressBroadcaster


def format_sse(message: str) -> str:
    """One server-sent event; embedded newlines are escaped so the event stays on one data line."""
    return "data: " + message.replace("\n", "\\n") + "\n\n"


def create_progress_router(broadcaster: ProgressBroadcaster, poll_seconds: float = 0.25):
    router = APIRouter(tags=["Progress"])

    @router.get(
        "/sse/logs",
        responses={
            200: {
                "content": {"text/event-stream": {"schema": {"type": "string"}}},
                "description": "Live progress lines as server-sent events",
            }
        },
    )
    async def sse_logs(request: Request):
        async def event_stream():
            subscription = broadcaster.subscribe()
            try:
                while not await request.is_disconnected():
                    # non-blocking read; idle clients sleep on the event loop, not in a worker thread
                    message = subscription.get_nowait()
                    if message is None:
                        await asyncio.sleep(poll_seconds)
                        continue
                    yield format_sse(message)
            finally:
                broadcaster.unsubscribe(subscription)

        return StreamingResponse(
            event_stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    return router
