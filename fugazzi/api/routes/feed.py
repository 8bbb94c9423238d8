from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
import json

from ...schemas.feed import FeedResponse, TransactionResponse

router = APIRouter()


@router.get("/", response_model=FeedResponse)
async def get_feed(request: Request):
    """Recent transactions, newest first."""
    feed = request.app.state.feed
    return FeedResponse(
        running=feed.running,
        transactions=[TransactionResponse.model_validate(r) for r in feed.snapshot()],
    )


@router.get("/stream")
async def stream_feed(request: Request):
    """Server-Sent Events: one event per new transaction."""
    feed = request.app.state.feed

    async def generate():
        queue = feed.subscribe()
        try:
            while not await request.is_disconnected():
                record = await queue.get()
                yield f"data: {json.dumps(record.to_dict())}\n\n"
        finally:
            feed.unsubscribe(queue)

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
