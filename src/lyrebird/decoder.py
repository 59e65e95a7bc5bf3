"""Decoding response bodies and delivering their text to a callback.

Two modes, chosen once per request:

* non-streaming: :func:`decode_body` parses the whole body and hands
  the first ``text`` block to the callback;
* streaming: :func:`decode_stream` reads byte chunks, splits them into
  frames and forwards each delta's text as it arrives.

``decode_stream()`` drains ``iter_decoded()``; :func:`iter_events` is
the event-level entry point for callers that want the typed events.
"""

from __future__ import annotations

import codecs
import inspect
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from typing import Any, Union

from pydantic import ValidationError

from lyrebird.errors import EncodingError, FrameDecodeWarning, ResponseParseError, StreamError
from lyrebird.events import ErrorEvent, StreamEvent
from lyrebird.frames import Frame, FrameBuffer, decode_event
from lyrebird.message import MessageResponse
from lyrebird.streaming import StreamAccumulator, StreamResult

logger = logging.getLogger(__name__)

Callback = Callable[[str], Union[Awaitable[Any], Any]]


async def deliver(callback: Callback, text: str) -> None:
    """Invoke *callback* and wait for it if it returned an awaitable."""
    result = callback(text)
    if inspect.isawaitable(result):
        await result


async def iter_frames(chunks: AsyncIterable[bytes]) -> AsyncIterator[Frame]:
    """Yield complete frames from a stream of byte chunks.

    Multi-byte characters split across chunk boundaries are carried over
    to the next chunk.  Stops at the ``[DONE]`` sentinel without reading
    another chunk, or when *chunks* is exhausted.

    Raises:
        EncodingError: If the bytes are not valid UTF-8.
    """
    utf8 = codecs.getincrementaldecoder("utf-8")()
    buffer = FrameBuffer()
    async for chunk in chunks:
        try:
            text = utf8.decode(chunk)
        except UnicodeDecodeError as e:
            raise EncodingError(f"Invalid UTF-8 sequence: {e}") from e
        buffer.feed(text)
        for frame in buffer.frames():
            if frame.is_done:
                return
            if not frame.raw.strip():
                continue
            yield frame

    try:
        utf8.decode(b"", final=True)
    except UnicodeDecodeError as e:
        raise EncodingError(f"Stream ended inside a UTF-8 sequence: {e}") from e
    if buffer.remainder.strip():
        logger.debug(
            "Discarding unterminated trailing frame: %r", buffer.remainder
        )


async def iter_decoded(
    chunks: AsyncIterable[bytes],
) -> AsyncIterator[tuple[Frame, StreamEvent | None]]:
    """Yield each frame with its decoded event, or ``None`` if it failed
    to decode.  Decode failures are logged and never end the stream."""
    async for frame in iter_frames(chunks):
        try:
            event = decode_event(frame.data)
        except FrameDecodeWarning as w:
            logger.warning(str(w))
            logger.debug("Frame decode failure: %s", w.reason)
            event = None
        yield frame, event


async def iter_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamEvent]:
    """Yield the typed events of a streaming body, skipping bad frames.

    Raises:
        StreamError: If the stream carries an ``error`` event.
    """
    async for _, event in iter_decoded(chunks):
        if event is None:
            continue
        if isinstance(event, ErrorEvent):
            raise StreamError(event.error.type, event.error.message)
        yield event


async def decode_stream(
    chunks: AsyncIterable[bytes],
    callback: Callback,
    verbose: bool = False,
) -> StreamResult:
    """Forward the text of every delta to *callback*, in arrival order.

    In verbose mode every frame's raw text is forwarded instead,
    whether or not it decodes.  Each callback invocation completes
    before the next chunk is requested.
    """
    accumulator = StreamAccumulator()
    async for frame, event in iter_decoded(chunks):
        if verbose:
            await deliver(callback, frame.raw)
        if event is None:
            continue
        accumulator.feed(event)
        if not verbose and event.text:
            await deliver(callback, event.text)
        elif not event.text:
            logger.debug("Skipping %s event", event.type)
    return accumulator.finalize()


async def decode_body(
    body: str,
    callback: Callback,
    verbose: bool = False,
) -> MessageResponse | None:
    """Deliver the first ``text`` block of a complete response body.

    The callback is not invoked when the response has no ``text``
    block.  In verbose mode the raw body is forwarded unparsed and
    ``None`` is returned.

    Raises:
        ResponseParseError: If *body* is not a response object with a
            ``content`` list.
    """
    if verbose:
        await deliver(callback, body)
        return None

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ResponseParseError(body) from e
    if not isinstance(data, dict) or not isinstance(data.get("content"), list):
        raise ResponseParseError(body)
    try:
        message = MessageResponse.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(body) from e

    text = message.first_text()
    if text is not None:
        await deliver(callback, text)
    return message
