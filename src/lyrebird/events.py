"""Typed events carried by a streaming response.

Each frame's ``data`` payload is a JSON object whose ``type`` field
selects one of the models below.  :data:`stream_event_adapter` decodes a
payload straight into the matching model.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from lyrebird.message import ContentBlock, MessageResponse, Usage


class Delta(BaseModel):
    """Incremental content fragment.

    ``text_delta`` carries ``text``; ``input_json_delta`` carries
    ``partial_json`` for a ``tool_use`` block.  The ``message_delta``
    event reuses this shape for ``stop_reason`` and ``stop_sequence``.
    """

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    text: str | None = None
    partial_json: str | None = None
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage | None = None


class ErrorDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    message: str
    details: Any = None


class _Event(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int | None = None
    delta: Delta | None = None
    message: MessageResponse | None = None

    @property
    def text(self) -> str | None:
        """Delta text carried by this event, if any."""
        if self.delta is None:
            return None
        return self.delta.text


class MessageStartEvent(_Event):
    type: Literal["message_start"]


class ContentBlockStartEvent(_Event):
    type: Literal["content_block_start"]
    content_block: ContentBlock | None = None


class PingEvent(_Event):
    type: Literal["ping"]


class ContentBlockDeltaEvent(_Event):
    type: Literal["content_block_delta"]


class ContentBlockStopEvent(_Event):
    type: Literal["content_block_stop"]


class MessageDeltaEvent(_Event):
    type: Literal["message_delta"]
    usage: Usage | None = None


class MessageStopEvent(_Event):
    type: Literal["message_stop"]


class ErrorEvent(_Event):
    type: Literal["error"]
    error: ErrorDetails


StreamEvent = Annotated[
    Union[
        MessageStartEvent,
        ContentBlockStartEvent,
        PingEvent,
        ContentBlockDeltaEvent,
        ContentBlockStopEvent,
        MessageDeltaEvent,
        MessageStopEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)

EVENT_TYPES = (
    "message_start",
    "content_block_start",
    "ping",
    "content_block_delta",
    "content_block_stop",
    "message_delta",
    "message_stop",
    "error",
)
