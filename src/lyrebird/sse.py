"""Server-Sent Events encoder for stream events.

The inverse of :mod:`lyrebird.frames`: useful for relaying a stream to
another consumer.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator

from pydantic import BaseModel

from lyrebird.frames import DONE_SENTINEL


def encode_frame(event: BaseModel) -> str:
    """Format one stream event as an SSE frame."""
    data = event.model_dump_json(exclude_none=True)
    return f"event: {event.type}\ndata: {data}\n\n"


async def sse_generator(
    event_stream: AsyncIterable[BaseModel],
    done: bool = False,
) -> AsyncIterator[str]:
    """Convert a stream event async iterator into SSE-formatted strings.

    With ``done=True`` a final ``data: [DONE]`` frame is appended.
    """
    async for event in event_stream:
        yield encode_frame(event)
    if done:
        yield f"data: {DONE_SENTINEL}\n\n"
