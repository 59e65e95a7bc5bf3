"""Sending requests to the Messages API.

:class:`Client` POSTs a :class:`~lyrebird.config.RequestConfig`, checks
the status and routes the body to the decoder.  There is no retry at
this layer; callers re-issue failed requests themselves.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from lyrebird.config import RequestConfig
from lyrebird.decoder import Callback, decode_body, decode_stream, iter_events
from lyrebird.errors import (
    BadRequest,
    LyrebirdError,
    StatusError,
    TransportError,
    Unauthorized,
    UnexpectedStatus,
)
from lyrebird.events import StreamEvent
from lyrebird.instrumentation import completion_span, record_error, record_usage
from lyrebird.message import MessageResponse
from lyrebird.streaming import StreamResult

logger = logging.getLogger(__name__)

SYSTEM_NAME = "anthropic"


def _status_error(response: httpx.Response) -> StatusError:
    """Map a non-200 response to its error, keeping the API's error
    type and message when the body carries them."""
    error_type = message = None
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error_type = payload["error"].get("type")
        message = payload["error"].get("message")

    if response.status_code == 400:
        return BadRequest(error_type, message)
    if response.status_code == 401:
        return Unauthorized(error_type, message)
    return UnexpectedStatus(response.status_code, error_type, message)


class Client:
    """Messages API client.

    Owns an ``httpx.AsyncClient`` unless one is passed in, in which case
    closing it is left to the caller.

    Example::

        async with Client() as client:
            await client.execute(config, print)
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @asynccontextmanager
    async def _send(self, config: RequestConfig) -> AsyncIterator[httpx.Response]:
        """POST *config* and yield the 200 response with its body unread.

        Raises:
            TransportError: If the exchange fails below HTTP or the body
                cannot be read (e.g. a corrupt content encoding).
            StatusError: If the status is anything but 200.
        """
        logger.debug(
            "POST %s model=%s stream=%s", config.url, config.model, config.stream
        )
        try:
            async with self.http_client.stream(
                "POST",
                config.url,
                headers=config.headers(),
                json=config.body(),
                timeout=config.timeout,
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    raise _status_error(response)
                yield response
        except httpx.RequestError as e:
            raise TransportError(f"Failed to send request: {e}") from e

    async def execute(
        self,
        config: RequestConfig,
        callback: Callback,
    ) -> StreamResult | MessageResponse | None:
        """Send *config* and deliver the response text to *callback*.

        Streaming requests call *callback* once per text fragment and
        return a :class:`StreamResult`.  Non-streaming requests call it
        at most once with the first text block and return the parsed
        :class:`MessageResponse` (``None`` in verbose mode).
        """
        async with completion_span(
            SYSTEM_NAME, config.model, config.stream
        ) as span:
            try:
                async with self._send(config) as response:
                    if config.stream:
                        result = await decode_stream(
                            response.aiter_bytes(), callback, config.verbose
                        )
                        record_usage(span, result.usage, result.model)
                        return result

                    await response.aread()
                    message = await decode_body(
                        response.text, callback, config.verbose
                    )
                    if message is not None:
                        record_usage(span, message.usage, message.model)
                    return message
            except LyrebirdError as e:
                record_error(span, e)
                raise

    async def events(self, config: RequestConfig) -> AsyncIterator[StreamEvent]:
        """Send a streaming request and yield its typed events.

        Closing the iterator early closes the response.
        """
        if not config.stream:
            raise ValueError("events() needs a config with stream=True")
        async with completion_span(SYSTEM_NAME, config.model, True) as span:
            try:
                async with self._send(config) as response:
                    async for event in iter_events(response.aiter_bytes()):
                        yield event
            except LyrebirdError as e:
                record_error(span, e)
                raise
