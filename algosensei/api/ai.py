"""
AI API endpoint
Streams the tutor's reply as a raw text body
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import StreamingResponse

from algosensei.api.deps import get_completion_relay, get_current_user
from algosensei.middleware.rate_limiter import ai_rate_limit
from algosensei.schemas.chat import AIRequest

logger = logging.getLogger(__name__)
router = APIRouter(tags=["ai"])


@router.post(
    "/ai",
    responses={
        200: {
            "description": "Streamed reply text",
            "content": {"text/event-stream": {"schema": {"type": "string"}}}
        }
    }
)
@ai_rate_limit()
async def converse(
    request: Request,
    body: AIRequest,
    background_tasks: BackgroundTasks,
    current_user: Dict[str, Any] = Depends(get_current_user),
    relay=Depends(get_completion_relay)
) -> StreamingResponse:
    """
    Stream a tutor reply to the conversation so far

    Request:
        ```json
        {
          "messages": [
            {"role": "user", "content": "How does binary search work?"},
            {"role": "user", "content": [
              {"type": "text", "text": "Is this correct?"},
              {"type": "image_url", "image_url": {"url": "data:image/png;base64,..."}}
            ]}
          ]
        }
        ```

    Response:
        text/event-stream body carrying raw reply text, chunk by chunk.
        Errors before the first chunk are returned as JSON (500); errors
        after it simply end the stream. The memory write of the reply runs
        after the body is complete.
    """
    stream = relay.converse(
        owner=current_user["email"],
        messages=body.messages,
        session_id=body.session_id,
    )

    # Pull the first chunk here so setup failures still map to JSON errors
    try:
        first_chunk = await anext(stream)
    except StopAsyncIteration:
        first_chunk = None

    background_tasks.add_task(relay.drain)

    async def event_stream():
        try:
            if first_chunk is None:
                return
            yield first_chunk
            async for chunk in stream:
                yield chunk
        finally:
            await stream.aclose()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"
        }
    )
